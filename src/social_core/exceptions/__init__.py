from .base import (
    ErrorKind,
    Severity,
    EntityError,
    NullEntityError,
    InvalidEntityError,
    NotFoundError,
    AlreadyExistsError,
    InvalidStorageError,
    LockedEntityError,
    FailedStorageError,
    FailedServiceError,
    FoundationError,
    ValidationError,
    DependencyValidationError,
    DependencyError,
    ServiceError,
)
from .mapper import translate_failure

__all__ = [
    "ErrorKind",
    "Severity",
    "EntityError",
    "NullEntityError",
    "InvalidEntityError",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidStorageError",
    "LockedEntityError",
    "FailedStorageError",
    "FailedServiceError",
    "FoundationError",
    "ValidationError",
    "DependencyValidationError",
    "DependencyError",
    "ServiceError",
    "translate_failure",
]
