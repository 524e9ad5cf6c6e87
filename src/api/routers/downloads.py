from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from src.api.deps import get_storage
from src.api.errors import http_error
from src.errors import MediaError
from src.services.images import download_file_name, to_jpeg
from src.services.keys import derive_key_from_url
from src.services.storage import StorageGateway

logger = logging.getLogger("uploads_router")

router = APIRouter(prefix="/api", tags=["downloads"])


@router.get("/download-image")
def download_image(url: str = Query(...), storage: StorageGateway = Depends(get_storage)):
    """Serve a stored photo as a JPEG attachment."""
    if not storage.is_available():
        raise HTTPException(status_code=503, detail="Cloud storage is not configured.")

    # only objects from our own bucket; never fetch arbitrary URLs
    key = derive_key_from_url(url, storage.public_base_url)
    if key is None:
        raise HTTPException(status_code=400, detail="URL does not belong to this bucket")

    try:
        obj = storage.get(key)
        if obj is None:
            raise HTTPException(status_code=404, detail="Image not found")
        data = to_jpeg(obj.body)
    except MediaError as e:
        logger.warning("download-image failed: key=%s error=%s", key, e)
        raise http_error(e)

    return Response(
        content=data,
        media_type="image/jpeg",
        headers={
            "Content-Disposition": f'attachment; filename="{download_file_name(key)}"',
            "Cache-Control": "no-store, no-cache, must-revalidate",
            "X-Content-Type-Options": "nosniff",
        },
    )
