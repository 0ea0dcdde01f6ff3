# src/community_maps/api/v1/endpoints/system.py
"""Public system endpoints: health and sitemap."""

from fastapi import APIRouter, Response

from community_maps.core.settings import settings
from community_maps.services.sitemap import build_sitemap, render_sitemap

from ..dependencies import SessionDep

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(db: SessionDep) -> Response:
    """Serve the XML sitemap of static pages and public maps."""
    xml = render_sitemap(build_sitemap(db, settings.site_url))
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )
