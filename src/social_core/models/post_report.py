from sqlalchemy import DateTime, ForeignKey, Text, UUID
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from ..database.base import Base
import uuid


class PostReport(Base):
    """
    A complaint filed by a profile against a post.
    """
    __tablename__ = "post_reports"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )

    details: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    reporter_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
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
        return f"<PostReport(id={self.id!r}, post_id={self.post_id!r}, reporter_id={self.reporter_id!r})>"
