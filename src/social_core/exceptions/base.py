"""
Error taxonomy of the foundation services.

Two levels:

- inner errors describe what actually went wrong (a null entity, invalid fields,
  a duplicate key, a storage outage). They carry a field-level `data` map.
- outer errors tell the caller what kind of failure it is and whether it is
  worth retrying with different input. Every outer error wraps exactly one
  inner error, which in turn keeps the native exception as its `__cause__`.

| Outer                        | Typical inner                                          |
| ---------------------------- | ------------------------------------------------------ |
| `ValidationError`            | `NullEntityError`, `InvalidEntityError`, `NotFoundError` |
| `DependencyValidationError`  | `AlreadyExistsError`, `InvalidStorageError`, `LockedEntityError` |
| `DependencyError`            | `FailedStorageError`                                   |
| `ServiceError`               | `FailedServiceError`                                   |
"""

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DEPENDENCY = "dependency"
    DEPENDENCY_VALIDATION = "dependency_validation"
    SERVICE = "service"


class Severity(str, Enum):
    ERROR = "error"
    CRITICAL = "critical"


def _label(entity: str) -> str:
    """'Post report' -> 'post report' for use inside a sentence."""
    return entity.lower()


# =================================================================================================================
# Inner errors
# =================================================================================================================

class EntityError(Exception):
    """
    Base for inner errors.

    - entity: display name of the entity ("Post", "Post report", ...)
    - data: field name -> list of messages, insertion ordered
    """

    def __init__(self, message: str, *, entity: str, data: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.data: dict[str, list[str]] = {}
        for field, messages in (data or {}).items():
            for text in messages:
                self.add_data(field, text)

    def add_data(self, field: str, message: str) -> None:
        self.data.setdefault(field, []).append(message)

    def __str__(self) -> str:
        if not self.data:
            return self.message
        details = "; ".join(f"{field}: {', '.join(messages)}" for field, messages in self.data.items())
        return f"{self.message} ({details})"


class NullEntityError(EntityError):
    def __init__(self, entity: str):
        super().__init__(f"{entity} is null.", entity=entity)


class InvalidEntityError(EntityError):
    """Collects every field violation found in one validation pass."""

    def __init__(self, entity: str, data: dict[str, list[str]] | None = None):
        super().__init__(
            f"Invalid {_label(entity)}. Please correct the errors and try again.",
            entity=entity,
            data=data,
        )

    def raise_if_any(self) -> None:
        if self.data:
            raise self


class NotFoundError(EntityError):
    def __init__(self, entity: str, ids: Iterable[object]):
        self.ids = tuple(ids)
        shown = ", ".join(str(value) for value in self.ids)
        super().__init__(f"Couldn't find {_label(entity)} with id: {shown}.", entity=entity)


class AlreadyExistsError(EntityError):
    def __init__(self, entity: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(f"{entity} with the same id already exists.", entity=entity)
        self.fields = list(fields) if fields else None
        # constraint names are for logs only, never part of the payload
        self.constraint = constraint


class InvalidStorageError(EntityError):
    """Storage rejected the entity: broken reference, missing or oversized column value, or check rule."""

    def __init__(self, entity: str, *, reason: str = "integrity",
                 fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(f"Invalid {_label(entity)} reference error occurred.", entity=entity)
        self.reason = reason
        self.fields = list(fields) if fields else None
        self.constraint = constraint


class LockedEntityError(EntityError):
    def __init__(self, entity: str):
        super().__init__(f"Locked {_label(entity)} record exception, please try again later.", entity=entity)


class FailedStorageError(EntityError):
    def __init__(self, entity: str):
        super().__init__(f"Failed {_label(entity)} storage error occurred, contact support.", entity=entity)


class FailedServiceError(EntityError):
    def __init__(self, entity: str):
        super().__init__(f"Failed {_label(entity)} service occurred, please contact support.", entity=entity)


# =================================================================================================================
# Outer errors
# =================================================================================================================

class FoundationError(Exception):
    """
    Base for the errors a foundation service raises to its callers.

    - kind: which tier this error belongs to (ErrorKind)
    - severity: how loudly the failure was logged (Severity)
    - entity: display name of the entity the operation worked on
    - inner: the wrapped inner error, also set as `__cause__` when raised
    """

    kind: ErrorKind
    default_severity: Severity = Severity.ERROR
    template: str

    def __init__(self, entity: str, inner: EntityError, *, severity: Severity | None = None):
        message = self.template.format(entity=entity)
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.inner = inner
        self.severity = severity or self.default_severity

    @property
    def data(self) -> dict[str, list[str]]:
        return self.inner.data

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict:
        """
        JSON-serializable summary of the failure:

            {
                "detail": "Post validation errors occurred, please try again.",
                "kind": "validation",
                "entity": "Post",
                "reason": "Invalid post. Please correct the errors and try again.",
                "errors": {"content": ["Text is required"]},
            }

        Raw database messages and constraint names are never included.
        """
        payload = {
            "detail": self.message,
            "kind": self.kind.value,
            "entity": self.entity,
            "reason": self.inner.message,
        }
        if self.inner.data:
            payload["errors"] = {field: list(messages) for field, messages in self.inner.data.items()}
        return payload


class ValidationError(FoundationError):
    kind = ErrorKind.VALIDATION
    template = "{entity} validation errors occurred, please try again."


class DependencyValidationError(FoundationError):
    kind = ErrorKind.DEPENDENCY_VALIDATION
    template = "{entity} dependency validation occurred, please try again."


class DependencyError(FoundationError):
    kind = ErrorKind.DEPENDENCY
    default_severity = Severity.CRITICAL
    template = "{entity} dependency error occurred, contact support."


class ServiceError(FoundationError):
    kind = ErrorKind.SERVICE
    default_severity = Severity.CRITICAL
    template = "{entity} service error occurred, contact support."


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
]
