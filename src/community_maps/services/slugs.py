"""Slug generation and validation for map URLs."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Collection, Iterable

from community_maps.core.errors import ValidationError
from community_maps.core.settings import settings

FALLBACK_SLUG = "map"
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 100

_STRIPPED_CHARS = re.compile(r"[*+~.()'\"!:@]")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_VALID_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(title: str | None) -> str:
    """Convert a human-entered title into a URL-safe slug.

    Unicode is folded to ASCII where a decomposition exists; characters
    without one are dropped. Long titles are cut to ``SLUG_MAX_LENGTH`` at a
    word boundary where one exists. Returns ``"map"`` when nothing survives.
    """
    if not title:
        return FALLBACK_SLUG

    text = unicodedata.normalize("NFKD", str(title))
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip().replace("&", " and ")
    text = _STRIPPED_CHARS.sub("", text)
    text = _NON_ALNUM_RUN.sub("-", text).strip("-")
    if len(text) > SLUG_MAX_LENGTH:
        cut = text[:SLUG_MAX_LENGTH]
        if text[SLUG_MAX_LENGTH] != "-" and "-" in cut:
            cut = cut.rsplit("-", 1)[0]
        text = cut.strip("-")
    return text or FALLBACK_SLUG


def generate_unique_slug(title: str | None, existing_slugs: Iterable[str] = ()) -> str:
    """Return ``slugify(title)``, suffixed with ``-1``, ``-2``... until unused."""
    taken: Collection[str] = (
        existing_slugs if isinstance(existing_slugs, (set, frozenset)) else set(existing_slugs)
    )
    base = slugify(title)
    if base not in taken:
        return base

    counter = 1
    while f"{base}-{counter}" in taken:
        counter += 1
    return f"{base}-{counter}"


def is_reserved_slug(slug: str) -> bool:
    """Return True when ``slug`` collides with an application route."""
    return slug.lower() in {reserved.lower() for reserved in settings.reserved_slugs}


def validate_slug(slug: str) -> str:
    """Check a user-supplied custom slug and return it unchanged.

    Raises:
        ValidationError: If the slug has the wrong length or characters.
    """
    if not SLUG_MIN_LENGTH <= len(slug) <= SLUG_MAX_LENGTH:
        raise ValidationError(
            f"Slug must be between {SLUG_MIN_LENGTH} and {SLUG_MAX_LENGTH} characters"
        )
    if not _VALID_SLUG.match(slug):
        raise ValidationError(
            "Slug may only contain lowercase letters, numbers and single hyphens"
        )
    return slug
