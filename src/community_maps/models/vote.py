# src/community_maps/models/vote.py
"""Model capturing upvotes on maps."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from community_maps.db.session import Base
from community_maps.db.time import utcnow


class Vote(Base):
    """One user's upvote of one map."""

    __tablename__ = "votes"
    __table_args__ = (Index("ix_votes_user_id", "user_id"),)

    # Composite primary key prevents duplicate votes from the same user.
    map_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("maps.id", ondelete="CASCADE"),
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
