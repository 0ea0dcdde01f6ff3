"""Vote ledger: at most one upvote per (map, user)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_maps.core.errors import NotFound, StorageError
from community_maps.db.dialect import insert_for
from community_maps.db.time import utcnow
from community_maps.models import Map, Vote

logger = logging.getLogger(__name__)


def upvote(db: Session, map_id: str, user_id: str) -> bool:
    """Record an upvote and return whether a new row was written.

    A repeated upvote hits the composite primary key and is absorbed by
    ``ON CONFLICT DO NOTHING``, so concurrent duplicates both succeed.
    """
    try:
        exists = db.get(Map, map_id) is not None
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch map") from exc
    if not exists:
        raise NotFound("Map not found")

    stmt = (
        insert_for(db, Vote)
        .values(map_id=map_id, user_id=user_id, created_at=utcnow())
        .on_conflict_do_nothing(index_elements=[Vote.map_id, Vote.user_id])
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Failed to add upvote") from exc

    created = bool(result.rowcount)
    if not created:
        logger.info("Duplicate upvote ignored for map %s by user %s", map_id, user_id)
    return created


def get_upvote_status(
    db: Session,
    map_ids: Sequence[str],
    user_id: str | None,
) -> dict[str, bool]:
    """Return ``{map_id: has_upvoted}`` for the whole batch in one query.

    Anonymous callers get ``False`` for every id without touching storage.
    """
    status = {map_id: False for map_id in map_ids}
    if user_id is None or not status:
        return status

    try:
        voted = db.scalars(
            select(Vote.map_id).where(
                Vote.user_id == user_id,
                Vote.map_id.in_(list(status)),
            )
        ).all()
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch upvote status") from exc

    for map_id in voted:
        status[map_id] = True
    return status


def vote_counts(db: Session, map_ids: Sequence[str]) -> dict[str, int]:
    """Return the number of upvotes per map id."""
    counts = {map_id: 0 for map_id in map_ids}
    if not counts:
        return counts

    try:
        rows = db.execute(
            select(Vote.map_id, func.count())
            .where(Vote.map_id.in_(list(counts)))
            .group_by(Vote.map_id)
        ).all()
    except SQLAlchemyError as exc:
        raise StorageError("Failed to count upvotes") from exc
    for map_id, total in rows:
        counts[map_id] = int(total)
    return counts
