"""Dialect-specific INSERT constructs for atomic upserts."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


def insert_for(db: Session, model: Any) -> Any:
    """Return an ``INSERT`` supporting ``ON CONFLICT`` for the session's dialect.

    Both PostgreSQL and SQLite accept ``on_conflict_do_update`` and
    ``on_conflict_do_nothing``; other backends are not supported.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"ON CONFLICT inserts are not supported on {dialect!r}")
