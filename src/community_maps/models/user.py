# src/community_maps/models/user.py
"""SQLAlchemy model for signed-in user profiles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from community_maps.db.session import Base
from community_maps.db.time import utcnow


class User(Base):
    """Profile keyed by the identifier the auth provider issued."""

    __tablename__ = "users"

    # Opaque, provider-issued id; never generated locally.
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="User")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    picture_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def display_name(self) -> str:
        """Return first and last name joined for display."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)
