from sqlalchemy import DateTime, ForeignKey, UUID
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from enum import Enum as PyEnum
from ..database.base import Base
import uuid


class Impression(PyEnum):
    """Reaction a profile leaves on a post."""
    LIKE = "like"
    DISLIKE = "dislike"
    LOVE = "love"
    LAUGH = "laugh"
    SAD = "sad"


class PostImpression(Base):
    """
    One profile's reaction to one post.

    Keyed by (post_id, profile_id): a profile holds at most one impression per post.
    """
    __tablename__ = "post_impressions"

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )

    profile_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True
    )

    impression: Mapped[Impression] = mapped_column(
        SQLEnum(Impression),
        nullable=False
    )

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )

    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<PostImpression(post_id={self.post_id!r}, profile_id={self.profile_id!r}, "
            f"impression={self.impression!r})>"
        )
