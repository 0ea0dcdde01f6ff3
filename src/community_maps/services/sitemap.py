"""Sitemap projection over the public map listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from xml.sax.saxutils import escape

from sqlalchemy.orm import Session

from community_maps.core.errors import MapsError
from community_maps.core.settings import settings
from community_maps.db.time import utcnow
from community_maps.services import maps as map_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SitemapEntry:
    """One ``<url>`` element."""

    url: str
    last_modified: datetime
    change_frequency: str
    priority: float


def static_entries(site_url: str) -> list[SitemapEntry]:
    """Return the pages that exist regardless of the data store."""
    now = utcnow()
    return [
        SitemapEntry(site_url, now, "daily", 1.0),
        SitemapEntry(f"{site_url}/create-map", now, "weekly", 0.8),
        SitemapEntry(f"{site_url}/my-maps", now, "weekly", 0.7),
    ]


def build_sitemap(db: Session, site_url: str | None = None) -> list[SitemapEntry]:
    """Return static entries plus one entry per public map.

    A data-store failure never fails the sitemap; the static entries are
    returned on their own.
    """
    base = (site_url or settings.site_url).rstrip("/")
    entries = static_entries(base)
    try:
        page = map_repository.list_maps(db, page=1, limit=settings.sitemap_max_maps)
    except MapsError as exc:
        logger.warning("Error generating sitemap, serving static entries: %s", exc)
        return entries

    entries.extend(
        SitemapEntry(
            url=f"{base}/maps/{map_.slug}",
            last_modified=map_.updated_at or map_.created_at,
            change_frequency="weekly",
            priority=0.9,
        )
        for map_ in page.items
    )
    return entries


def render_sitemap(entries: list[SitemapEntry]) -> str:
    """Serialise entries as a sitemaps.org XML document."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for entry in entries:
        lines.extend(
            [
                "  <url>",
                f"    <loc>{escape(entry.url)}</loc>",
                f"    <lastmod>{entry.last_modified.date().isoformat()}</lastmod>",
                f"    <changefreq>{entry.change_frequency}</changefreq>",
                f"    <priority>{entry.priority:.1f}</priority>",
                "  </url>",
            ]
        )
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
