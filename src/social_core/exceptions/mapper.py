import re
import logging

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from .integrity_classifier import classify_integrity_error, ConstraintViolation
from .base import (
    AlreadyExistsError,
    DependencyError,
    DependencyValidationError,
    EntityError,
    FailedServiceError,
    FailedStorageError,
    FoundationError,
    InvalidEntityError,
    InvalidStorageError,
    LockedEntityError,
    NotFoundError,
    NullEntityError,
    ServiceError,
    Severity,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Inner errors raised by the services themselves and the tier that wraps them
INNER_TO_OUTER: dict[type[EntityError], type[FoundationError]] = {
    NullEntityError: ValidationError,
    InvalidEntityError: ValidationError,
    NotFoundError: ValidationError,
    AlreadyExistsError: DependencyValidationError,
    InvalidStorageError: DependencyValidationError,
    LockedEntityError: DependencyValidationError,
    FailedStorageError: DependencyError,
    FailedServiceError: ServiceError,
}

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    Column names from common Postgres messages:
      - 'null value in column "author" violates not-null constraint'
      - 'DETAIL:  Key (email)=(a@b.com) already exists.'
    """
    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # 'UNIQUE constraint failed: profiles.email' / 'NOT NULL constraint failed: posts.author'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE | re.MULTILINE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the database message (Postgres, SQLite).
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    if not msg:
        return None
    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def _map_integrity_error(exc: IntegrityError, entity: str) -> EntityError:
    violation, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)

    if violation is ConstraintViolation.UNIQUE:
        logger.debug(
            "mapper.duplicate_detected",
            extra={"entity": entity, "fields": columns, "constraint": constraint_name},
        )
        return AlreadyExistsError(entity, fields=columns, constraint=constraint_name)

    logger.debug(
        "mapper.integrity_violation",
        extra={"entity": entity, "reason": violation.value, "fields": columns, "constraint": constraint_name},
    )
    return InvalidStorageError(entity, reason=violation.value, fields=columns, constraint=constraint_name)


def translate_failure(exc: Exception, entity: str) -> FoundationError:
    """
    Translate any exception raised during a service operation into an outer error.

    Pure: nothing is logged at INFO or above and nothing is raised. The returned
    error wraps an inner error (`error.inner`); for native exceptions the inner
    error's `__cause__` is the original exception.

    | Caught                         | Inner                  | Outer                      | Severity |
    | ------------------------------ | ---------------------- | -------------------------- | -------- |
    | inner error raised internally  | itself                 | per INNER_TO_OUTER         | ERROR    |
    | StaleDataError                 | LockedEntityError      | DependencyValidationError  | ERROR    |
    | IntegrityError (unique)        | AlreadyExistsError     | DependencyValidationError  | ERROR    |
    | IntegrityError (other)         | InvalidStorageError    | DependencyValidationError  | ERROR    |
    | DataError                      | InvalidStorageError    | DependencyValidationError  | ERROR    |
    | other SQLAlchemyError          | FailedStorageError     | DependencyError            | CRITICAL |
    | anything else                  | FailedServiceError     | ServiceError               | CRITICAL |
    """
    if isinstance(exc, FoundationError):
        return exc

    if isinstance(exc, EntityError):
        outer_cls = INNER_TO_OUTER.get(type(exc), ServiceError)
        return outer_cls(entity, exc)

    # StaleDataError, IntegrityError and DataError are SQLAlchemyErrors: check them first
    if isinstance(exc, StaleDataError):
        inner = LockedEntityError(entity)
        inner.__cause__ = exc
        return DependencyValidationError(entity, inner)

    if isinstance(exc, IntegrityError):
        inner = _map_integrity_error(exc, entity)
        inner.__cause__ = exc
        return DependencyValidationError(entity, inner)

    # DataError is also a DBAPIError: a rejected value (too long, out of range), not an outage
    if isinstance(exc, DataError):
        inner = InvalidStorageError(entity, reason="data")
        inner.__cause__ = exc
        return DependencyValidationError(entity, inner)

    if isinstance(exc, SQLAlchemyError):
        inner = FailedStorageError(entity)
        inner.__cause__ = exc
        return DependencyError(entity, inner, severity=Severity.CRITICAL)

    inner = FailedServiceError(entity)
    inner.__cause__ = exc
    return ServiceError(entity, inner)
