from sqlalchemy import String, DateTime, Text, UUID
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from ..database.base import Base
import uuid


class Post(Base):
    """
    A piece of content published by an author.

    Dates are supplied by the caller; the service validates them before any write.
    """
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    author: Mapped[str] = mapped_column(
        String(100),
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
        return f"<Post(id={self.id!r}, author={self.author!r})>"
