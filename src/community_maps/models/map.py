# src/community_maps/models/map.py
"""SQLAlchemy model for user-curated maps."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_maps.db.session import Base
from community_maps.db.time import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class Map(Base):
    """A named, publicly readable collection of locations owned by one user."""

    __tablename__ = "maps"
    __table_args__ = (Index("ix_maps_created_at", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # Public identifier; unique across all maps.
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    short_description: Mapped[str] = mapped_column(Text, nullable=False)
    # Rich text (markdown) body.
    body: Mapped[str] = mapped_column(Text, nullable=False)
    display_picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    owner = relationship("User", lazy="joined")
    locations = relationship(
        "Location",
        back_populates="map",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
