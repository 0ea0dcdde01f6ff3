# src/community_maps/models/location.py
"""SQLAlchemy model for locations submitted to maps."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_maps.db.session import Base
from community_maps.db.time import utcnow

LOCATION_STATUS_PENDING = "pending"
LOCATION_STATUS_APPROVED = "approved"
LOCATION_STATUS_REJECTED = "rejected"

LOCATION_STATUSES = (
    LOCATION_STATUS_PENDING,
    LOCATION_STATUS_APPROVED,
    LOCATION_STATUS_REJECTED,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class Location(Base):
    """Point of interest proposed for a map, subject to owner moderation."""

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_locations_status",
        ),
        CheckConstraint(
            "(status = 'approved') = is_approved",
            name="ck_locations_is_approved_matches_status",
        ),
        CheckConstraint("latitude BETWEEN -90 AND 90", name="ck_locations_latitude"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="ck_locations_longitude"),
        Index("ix_locations_map_id_status", "map_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    map_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("maps.id", ondelete="CASCADE"),
        nullable=False,
    )
    creator_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Moderation state machine: pending -> approved | rejected.
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=LOCATION_STATUS_PENDING
    )
    # Denormalised flag; always equals (status == approved).
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    map = relationship("Map", back_populates="locations")
    creator = relationship("User")

    def set_status(self, status: str) -> None:
        """Move to ``status`` keeping ``is_approved`` in step with it."""
        if status not in LOCATION_STATUSES:
            raise ValueError(f"Unknown location status: {status!r}")
        self.status = status
        self.is_approved = status == LOCATION_STATUS_APPROVED
        self.updated_at = utcnow()
