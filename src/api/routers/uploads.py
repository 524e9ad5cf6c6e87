# COMPONENT: UPLOAD API ROUTES
# REQUIREMENTS SATISFIED: proxied uploads, presigned direct uploads, asset deletion

"""
src/api/routers/uploads.py

HTTP endpoints for getting media into (and out of) object storage.

Endpoints:
    - POST /api/upload               : admin multipart upload to any folder
    - POST /api/upload/public        : anonymous image upload to public folders
    - POST /api/upload/video-proxy   : anonymous video upload (100 MB ceiling)
    - POST /api/upload/video         : admin presigned PUT for one video
    - POST /api/r2/presign           : admin presigned PUTs for a batch of files
    - POST /api/upload/confirm       : HEAD check that a presigned upload landed
    - POST /api/upload/delete        : admin delete of an asset by public URL

The routes only translate HTTP to service calls. Validation, key
derivation and storage errors all come from the services and are mapped to
status codes by src/api/errors.py.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from src.api.deps import (
    get_presign_service,
    get_storage,
    get_upload_service,
    require_admin,
)
from src.api.errors import http_error
from src.errors import MediaError
from src.schemas.media import (
    BatchPresignRequest,
    BatchPresignResult,
    ConfirmResponse,
    PresignRequest,
    PresignResponse,
    UploadResponse,
    UrlRequest,
)
from src.services.keys import derive_key_from_url
from src.services.presign import PresignService
from src.services.storage import StorageGateway
from src.services.uploads import UploadService

logger = logging.getLogger("uploads_router")

router = APIRouter(prefix="/api", tags=["uploads"])


def _store(service: UploadService, file: UploadFile, folder: str, anonymous: bool) -> UploadResponse:
    try:
        ref = service.upload(
            file.file,
            file.filename or "",
            file.content_type or "",
            folder,
            size=file.size,
            anonymous=anonymous,
        )
    except MediaError as e:
        logger.warning("upload rejected: folder=%s file=%s error=%s", folder, file.filename, e)
        raise http_error(e)
    return UploadResponse(url=ref.url, key=ref.key)


@router.post("/upload", response_model=UploadResponse, dependencies=[Depends(require_admin)])
def upload(
    file: UploadFile = File(...),
    folder: str = Form("gallery"),
    service: UploadService = Depends(get_upload_service),
):
    return _store(service, file, folder, anonymous=False)


@router.post("/upload/public", response_model=UploadResponse)
def upload_public(
    file: UploadFile = File(...),
    folder: str = Form(...),
    service: UploadService = Depends(get_upload_service),
):
    return _store(service, file, folder, anonymous=True)


@router.post("/upload/video-proxy", response_model=UploadResponse)
def upload_video_proxy(
    file: UploadFile = File(...),
    folder: str = Form("videos"),
    service: UploadService = Depends(get_upload_service),
):
    logger.info("video-proxy upload: file=%s size=%s", file.filename, file.size)
    return _store(service, file, folder, anonymous=True)


@router.post("/upload/video", response_model=PresignResponse, dependencies=[Depends(require_admin)])
def presign_video(body: PresignRequest, service: PresignService = Depends(get_presign_service)):
    try:
        issued = service.issue_presigned_upload(
            body.file_name,
            body.content_type,
            body.folder,
            size=body.file_size,
        )
    except MediaError as e:
        logger.warning("presign rejected: file=%s error=%s", body.file_name, e)
        raise http_error(e)
    return PresignResponse(upload_url=issued.upload_url, key=issued.key, url=issued.public_url)


@router.post("/r2/presign", response_model=BatchPresignResult, dependencies=[Depends(require_admin)])
def presign_batch(body: BatchPresignRequest, service: PresignService = Depends(get_presign_service)):
    try:
        return service.issue_presigned_batch(body.files, body.folder)
    except MediaError as e:
        raise http_error(e)


@router.post("/upload/confirm", response_model=ConfirmResponse)
def confirm_upload(body: UrlRequest, service: PresignService = Depends(get_presign_service)):
    try:
        confirmed = service.confirm_upload(body.url)
    except MediaError as e:
        raise http_error(e)
    return ConfirmResponse(url=body.url, confirmed=confirmed)


@router.post("/upload/delete", dependencies=[Depends(require_admin)])
def delete_upload(body: UrlRequest, storage: StorageGateway = Depends(get_storage)):
    if not storage.is_available():
        raise HTTPException(status_code=503, detail="Cloud storage is not configured.")

    key = derive_key_from_url(body.url.rstrip("/"), storage.public_base_url)
    if key is None:
        logger.warning("delete rejected, foreign url: %s", body.url)
        raise HTTPException(status_code=400, detail="URL does not belong to this bucket")

    try:
        storage.delete(key)
    except MediaError as e:
        raise http_error(e)

    logger.info("deleted object: key=%s", key)
    return {"success": True, "key": key}
