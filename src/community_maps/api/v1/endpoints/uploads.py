# src/community_maps/api/v1/endpoints/uploads.py
"""Image upload endpoint for map display pictures."""

from fastapi import APIRouter, File, UploadFile, status

from community_maps.core.settings import settings

from ..dependencies import CurrentUserDep, ObjectStorageDep

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/images", status_code=status.HTTP_201_CREATED)
async def upload_image(
    storage: ObjectStorageDep,
    current_user: CurrentUserDep,
    file: UploadFile = File(...),
) -> dict[str, str]:
    """Store an uploaded image and return its public URL.

    Reads at most one byte past the size limit; anything longer is rejected.
    """
    data = await file.read(settings.image_max_bytes + 1)
    url = storage.put(
        data,
        filename=file.filename,
        content_type=file.content_type or "",
    )
    return {"url": url}
