# src/community_maps/models/location_vote.py
"""Model capturing upvotes on individual locations."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from community_maps.db.session import Base
from community_maps.db.time import utcnow


class LocationVote(Base):
    """One user's upvote of one location; removable, unlike map votes."""

    __tablename__ = "location_votes"
    __table_args__ = (Index("ix_location_votes_user_id", "user_id"),)

    location_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("locations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
