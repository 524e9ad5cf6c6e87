# COMPONENT: UPLOAD INTAKE SERVICE
# REQUIREMENTS SATISFIED: folder/content-type/size policy, proxied uploads to object storage

"""
src/services/uploads.py

Accepts uploaded files and places them in object storage.

This module owns the one policy table that decides which content types may
be stored in which folder and how large they may be. Both the direct upload
path (this service) and the presign path (src/services/presign.py) consult
it through `validate_upload`, so the two can never drift apart.

Policy summary:
    - Image folders accept common web image types, including SVG for logos.
    - The videos folder accepts MP4, WebM, MOV, AVI and MKV.
    - Videos are capped at 500 MB for admin callers and 100 MB for anonymous
      (proxy) callers.
    - Images have no ceiling here; the browser compresses them before upload.
    - Anonymous callers may only write to the public folders.

Failure ordering:
    Validation runs before any storage call. The service never writes a
    database row; callers persist metadata only after `upload` has returned
    a URL, so a storage failure cannot leave a half-written record.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, FrozenSet, NamedTuple, Optional

from src.aws.s3_utils import Body
from src.errors import StorageUnavailable, ValidationError
from src.schemas.media import AssetReference
from src.services.keys import clean_file_name, derive_key, now_millis, public_url_for
from src.services.storage import StorageGateway

logger = logging.getLogger("media_lifecycle")

MB = 1024 * 1024

IMAGE_TYPES: FrozenSet[str] = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/gif",
        "image/svg+xml",
    }
)

VIDEO_TYPES: FrozenSet[str] = frozenset(
    {
        "video/mp4",
        "video/webm",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-matroska",
    }
)


class FolderPolicy(NamedTuple):
    content_types: FrozenSet[str]
    # None means no ceiling at this layer
    max_bytes: Optional[int]
    max_bytes_anonymous: Optional[int]
    public: bool
    type_label: str


_IMAGE = FolderPolicy(IMAGE_TYPES, None, None, True, "images (including SVG)")
_PRIVATE_IMAGE = _IMAGE._replace(public=False)

FOLDER_POLICIES: Dict[str, FolderPolicy] = {
    "events": _PRIVATE_IMAGE,
    "gallery": _PRIVATE_IMAGE,
    "banners": _IMAGE,
    "logos": _IMAGE,
    "avatars": _IMAGE,
    "team": _IMAGE,
    "reviews": _IMAGE,
    "videos": FolderPolicy(VIDEO_TYPES, 500 * MB, 100 * MB, True, "MP4, WebM, MOV, AVI, and MKV"),
}


def validate_upload(
    folder: str,
    content_type: Optional[str],
    size: Optional[int] = None,
    anonymous: bool = False,
) -> FolderPolicy:
    """Check a prospective upload against the policy table. Raises ValidationError."""
    policy = FOLDER_POLICIES.get(folder or "")
    if policy is None:
        raise ValidationError(f"Invalid folder specified: {folder!r}")

    if anonymous and not policy.public:
        raise ValidationError(f"Folder {folder!r} requires an authenticated upload")

    if (content_type or "").lower() not in policy.content_types:
        raise ValidationError(f"Invalid file type. Only {policy.type_label} are allowed.")

    ceiling = policy.max_bytes_anonymous if anonymous else policy.max_bytes
    if ceiling is not None and size is not None and size > ceiling:
        raise ValidationError(f"File too large. Maximum size is {ceiling // MB}MB.")

    return policy


class UploadService:
    def __init__(self, gateway: StorageGateway, clock: Callable[[], int] = now_millis):
        self._gateway = gateway
        self._clock = clock

    def upload(
        self,
        body: Body,
        file_name: str,
        content_type: str,
        folder: str,
        *,
        size: Optional[int] = None,
        anonymous: bool = False,
    ) -> AssetReference:
        if not self._gateway.is_available():
            raise StorageUnavailable(
                "Cloud storage is not configured. Please set up R2 environment variables."
            )

        if size is None and isinstance(body, (bytes, bytearray)):
            size = len(body)

        validate_upload(folder, content_type, size, anonymous)
        name = clean_file_name(file_name)

        key = derive_key(folder, name, self._clock())
        # StorageWriteError propagates; the caller may need to re-read the body to retry
        self._gateway.put(key, body, content_type)

        url = public_url_for(key, self._gateway.public_base_url)
        logger.info("UPLOAD complete: folder=%s key=%s size=%s", folder, key, size)
        return AssetReference(url=url, key=key)
