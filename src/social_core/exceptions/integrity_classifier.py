import logging
from enum import Enum
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

# =================================================================================================================
# Constraint violation kinds
# =================================================================================================================
# Labels only: translate_failure() turns them into AlreadyExistsError / InvalidStorageError.


class ConstraintViolation(str, Enum):
    """Which kind of constraint an IntegrityError broke; the value is the reported `reason`."""

    UNIQUE = "unique"
    NOT_NULL = "not_null"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    UNKNOWN = "unknown"


# =================================================================================================================
# Postgres error code mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_VIOLATION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: ConstraintViolation.UNIQUE,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: ConstraintViolation.NOT_NULL,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ConstraintViolation.FOREIGN_KEY,
    PostgresErrorCodes.CHECK_VIOLATION.value: ConstraintViolation.CHECK,
}


# =================================================================================================================
# Integrity Error Classifiers
# =================================================================================================================

def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _postgres_sqlstate(orig) -> str | None:
    # psycopg exposes `pgcode`; the asyncpg adapter exposes `sqlstate`
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _postgres_constraint_name(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None:
        return getattr(diag, "constraint_name", None)
    # asyncpg keeps the driver exception as the adapter's cause
    return getattr(orig.__cause__, "constraint_name", None)


def _classify_from_postgres_diag(orig) -> tuple[ConstraintViolation | None, str | None]:
    """
    Classify a Postgres integrity error from its SQLSTATE and diagnostics.
    Returns (None, None) when the driver error carries no SQLSTATE.
    """
    pgcode = _postgres_sqlstate(orig)
    if not pgcode:
        return None, None

    constraint_name = _postgres_constraint_name(orig)
    violation = PGCODE_VIOLATION_MAP.get(pgcode)

    if violation:
        logger.debug(
            "Postgres integrity diagnostic",
            extra={"pgcode": pgcode, "constraint_name": constraint_name},
        )
        return violation, constraint_name

    logger.warning(
        "Unknown Postgres integrity error code encountered",
        extra={"pgcode": pgcode, "constraint_name": constraint_name},
    )
    logger.debug("Postgres orig diagnostic (raw)", extra={"orig_repr": repr(orig)})

    return ConstraintViolation.UNKNOWN, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[ConstraintViolation, None]:
    """
    Classify an integrity error from its message text (SQLite, MySQL, ...).
    """
    normalized = msg.lower()

    if _match_any(normalized, ["unique constraint", "unique failed", "unique violation", "duplicate"]):
        return ConstraintViolation.UNIQUE, None

    if _match_any(normalized, ["not null constraint", "not null", "null value in column"]):
        return ConstraintViolation.NOT_NULL, None

    if _match_any(normalized, ["foreign key constraint", "foreign key", "is not present in table"]):
        return ConstraintViolation.FOREIGN_KEY, None

    if _match_any(normalized, ["check constraint", "check failed"]):
        return ConstraintViolation.CHECK, None

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": (msg or "")[:200]})
    logger.debug("Unknown integrity raw message", extra={"raw": msg})
    return ConstraintViolation.UNKNOWN, None


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintViolation, str | None]:
    """
    Classify a SQLAlchemy IntegrityError into a ConstraintViolation.

    Postgres diagnostics are preferred; other backends fall back to message matching.

    Returns:
        A tuple of (ConstraintViolation, constraint name if available)
    """
    orig = exc.orig

    violation, constraint_name = _classify_from_postgres_diag(orig)
    if violation is not None:
        return violation, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc))
