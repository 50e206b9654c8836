"""
Per-entity validation rules.

Each entity declares its key, the other identifiers it must carry, its required
text and value attributes and where its timestamps live. The validators in
`entity_validators` read these tables instead of hard-coding one function per entity.
"""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class EntityRules:
    entity_name: str
    # primary key attributes, in the order the storage lookup expects them
    key_fields: tuple[str, ...] = ("id",)
    # foreign identifiers that must be set as well
    reference_fields: tuple[str, ...] = ()
    text_fields: tuple[str, ...] = ()
    # non-text attributes that must not be None (enums, flags, ...)
    value_fields: tuple[str, ...] = ()
    created_field: str = "created_date"
    updated_field: str = "updated_date"
    # None means "use the configured window"
    recency_window: timedelta | None = None

    @property
    def id_fields(self) -> tuple[str, ...]:
        return self.key_fields + self.reference_fields

    def key_of(self, entity) -> tuple:
        return tuple(getattr(entity, field) for field in self.key_fields)


POST_RULES = EntityRules(
    entity_name="Post",
    text_fields=("content", "author"),
)

PROFILE_RULES = EntityRules(
    entity_name="Profile",
    text_fields=("first_name", "last_name", "username", "email"),
)

POST_REPORT_RULES = EntityRules(
    entity_name="Post report",
    reference_fields=("post_id", "reporter_id"),
    text_fields=("details",),
)

POST_IMPRESSION_RULES = EntityRules(
    entity_name="Post impression",
    key_fields=("post_id", "profile_id"),
    value_fields=("impression",),
)

ALL_RULES = (POST_RULES, PROFILE_RULES, POST_REPORT_RULES, POST_IMPRESSION_RULES)
