"""
Validation functions shared by every foundation service.

They never query storage or read the clock: the caller passes in the current time
and the stored entity. Field violations are collected into one
InvalidEntityError per pass so the caller sees every problem at once.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from sqlalchemy import inspect

from ..exceptions.base import InvalidEntityError, NotFoundError, NullEntityError
from .rules import EntityRules

NIL_UUID = uuid.UUID(int=0)
MIN_DATETIME = datetime.min.replace(tzinfo=timezone.utc)

ID_REQUIRED = "Id is required"
TEXT_REQUIRED = "Text is required"
VALUE_REQUIRED = "Value is required"
DATE_REQUIRED = "Date is required"
DATE_NOT_RECENT = "Date is not recent"


def date_not_same(other_field: str) -> str:
    return f"Date is not the same as {other_field}"


def date_same(other_field: str) -> str:
    return f"Date is the same as {other_field}"


# -----------------------
# Predicates
# -----------------------

def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC (SQLite drops the offset on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_invalid_id(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, uuid.UUID):
        return value == NIL_UUID
    if isinstance(value, str):
        return not value.strip()
    return False


def is_invalid_text(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_invalid_date(value: datetime | None) -> bool:
    return value is None or as_utc(value) == MIN_DATETIME


def is_same_moment(first: datetime | None, second: datetime | None) -> bool:
    if first is None or second is None:
        return first is None and second is None
    return as_utc(first) == as_utc(second)


def is_not_recent(value: datetime, now: datetime, window: timedelta) -> bool:
    return abs(as_utc(now) - as_utc(value)) > window


def persisted_value(instance, field: str) -> Any:
    """
    Value of `field` as last loaded from (or written to) storage.

    The session can hand back the very object the caller edited; a pending edit
    then shows up in the attribute history as the replaced value.
    """
    state = inspect(instance, raiseerr=False)
    if state is None:
        return getattr(instance, field)
    history = state.attrs[field].history
    if history.deleted:
        return history.deleted[0]
    return getattr(instance, field)


# -----------------------
# Collectors
# -----------------------

def _collect_required(entity, rules: EntityRules, error: InvalidEntityError) -> None:
    for field in rules.id_fields:
        if is_invalid_id(getattr(entity, field)):
            error.add_data(field, ID_REQUIRED)

    for field in rules.text_fields:
        if is_invalid_text(getattr(entity, field)):
            error.add_data(field, TEXT_REQUIRED)

    for field in rules.value_fields:
        if getattr(entity, field) is None:
            error.add_data(field, VALUE_REQUIRED)

    for field in (rules.created_field, rules.updated_field):
        if is_invalid_date(getattr(entity, field)):
            error.add_data(field, DATE_REQUIRED)


# -----------------------
# Validations
# -----------------------

def validate_not_null(entity, rules: EntityRules) -> None:
    if entity is None:
        raise NullEntityError(rules.entity_name)


def validate_on_add(entity, rules: EntityRules) -> None:
    """
    Null check, required fields, and `updated_date == created_date`.
    """
    validate_not_null(entity, rules)

    error = InvalidEntityError(rules.entity_name)
    _collect_required(entity, rules, error)

    created = getattr(entity, rules.created_field)
    updated = getattr(entity, rules.updated_field)
    if not is_same_moment(updated, created):
        error.add_data(rules.updated_field, date_not_same(rules.created_field))

    error.raise_if_any()


def validate_on_modify(entity, rules: EntityRules) -> None:
    """
    Structural pass of a modification: null check, required fields, and
    `updated_date != created_date`. Does not need the current time.
    """
    validate_not_null(entity, rules)

    error = InvalidEntityError(rules.entity_name)
    _collect_required(entity, rules, error)

    created = getattr(entity, rules.created_field)
    updated = getattr(entity, rules.updated_field)
    if is_same_moment(updated, created):
        error.add_data(rules.updated_field, date_same(rules.created_field))

    error.raise_if_any()


def validate_recency(entity, rules: EntityRules, now: datetime, window: timedelta) -> None:
    """`updated_date` must lie within `window` of `now`, on either side."""
    updated = getattr(entity, rules.updated_field)
    if is_not_recent(updated, now, window):
        raise InvalidEntityError(rules.entity_name, {rules.updated_field: [DATE_NOT_RECENT]})


def validate_ids(ids: Iterable[Any], rules: EntityRules) -> None:
    """Identifier check for lookups; values are matched to `rules.key_fields` by position."""
    ids = tuple(ids)
    error = InvalidEntityError(rules.entity_name)

    if len(ids) != len(rules.key_fields):
        for field in rules.key_fields:
            error.add_data(field, ID_REQUIRED)
        error.raise_if_any()

    for field, value in zip(rules.key_fields, ids):
        if is_invalid_id(value):
            error.add_data(field, ID_REQUIRED)

    error.raise_if_any()


def validate_storage_entity_exists(stored, rules: EntityRules, ids: Iterable[Any]) -> None:
    if stored is None:
        raise NotFoundError(rules.entity_name, ids)


def validate_against_storage(entity, stored, rules: EntityRules) -> None:
    """
    The stored record must exist and the submitted `created_date` must match it.
    """
    validate_storage_entity_exists(stored, rules, rules.key_of(entity))

    submitted = getattr(entity, rules.created_field)
    existing = persisted_value(stored, rules.created_field)
    if not is_same_moment(submitted, existing):
        raise InvalidEntityError(
            rules.entity_name,
            {rules.created_field: [date_not_same(rules.created_field)]},
        )
