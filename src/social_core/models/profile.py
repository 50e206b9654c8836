from sqlalchemy import String, DateTime, Text, UUID
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from ..database.base import Base
import uuid


class Profile(Base):
    """
    Public profile of a platform member.
    """
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Username and email are unique across profiles
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False
    )

    email: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False
    )

    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )

    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id!r}, username={self.username!r}, email={self.email!r})>"
