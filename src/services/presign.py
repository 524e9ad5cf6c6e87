# COMPONENT: PRESIGNED UPLOAD ISSUER
# REQUIREMENTS SATISFIED: direct browser-to-storage uploads, batch presigning, optional upload confirmation

"""
src/services/presign.py

Issues time-boxed presigned PUT URLs so browsers can upload large files
straight to object storage without the body passing through this server.

Every request is validated against the same folder policy table as the
direct upload path before anything is signed. The public URL handed back
is computed up front and is therefore optimistic: it only resolves once the
browser's PUT to `upload_url` has succeeded. Callers should check the PUT
response before persisting the public URL, or call `confirm_upload`, which
issues a HEAD request against the public URL.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

import requests

from src.aws.s3_utils import PRESIGN_TTL_SECONDS
from src.errors import MediaError, StorageUnavailable, ValidationError
from src.schemas.media import (
    BatchPresignItem,
    BatchPresignResult,
    PresignedUpload,
    PresignFile,
)
from src.services.keys import (
    clean_file_name,
    derive_key,
    derive_key_from_url,
    now_millis,
    public_url_for,
    random_suffix,
)
from src.services.storage import StorageGateway
from src.services.uploads import FOLDER_POLICIES, validate_upload

logger = logging.getLogger("media_lifecycle")

CONFIRM_TIMEOUT_SECONDS = 10


class PresignService:
    def __init__(
        self,
        gateway: StorageGateway,
        clock: Callable[[], int] = now_millis,
        suffix: Callable[[], str] = random_suffix,
        ttl_seconds: int = PRESIGN_TTL_SECONDS,
    ):
        self._gateway = gateway
        self._clock = clock
        self._suffix = suffix
        self._ttl = ttl_seconds

    def _check_available(self) -> None:
        if not self._gateway.is_available():
            raise StorageUnavailable(
                "Cloud storage is not configured. Please set up R2 environment variables."
            )

    def _sign(self, name: str, content_type: str, folder: str, size: Optional[int]) -> PresignedUpload:
        key = derive_key(folder, name, self._clock(), self._suffix())
        upload_url = self._gateway.presign_put(
            key,
            content_type,
            ttl_seconds=self._ttl,
            content_length=size,
        )
        return PresignedUpload(
            upload_url=upload_url,
            key=key,
            public_url=public_url_for(key, self._gateway.public_base_url),
        )

    def issue_presigned_upload(
        self,
        file_name: str,
        content_type: str,
        folder: str,
        *,
        size: Optional[int] = None,
    ) -> PresignedUpload:
        self._check_available()
        validate_upload(folder, content_type, size)
        name = clean_file_name(file_name)

        issued = self._sign(name, content_type, folder, size)
        logger.info("PRESIGN issued: folder=%s key=%s ttl=%s", folder, issued.key, self._ttl)
        return issued

    def issue_presigned_batch(self, files: Iterable[PresignFile], folder: str) -> BatchPresignResult:
        """
        Presign a batch of files for one folder.

        The folder is validated once for the batch. After that each file
        succeeds or fails on its own and failures are reported per item.
        """
        self._check_available()
        files = list(files)
        if not files:
            raise ValidationError("No files provided")
        if folder not in FOLDER_POLICIES:
            raise ValidationError(f"Invalid folder specified: {folder!r}")

        items: List[BatchPresignItem] = []
        for f in files:
            content_type = f.type or "image/jpeg"
            try:
                validate_upload(folder, content_type, f.size)
                issued = self._sign(clean_file_name(f.name), content_type, folder, f.size)
            except MediaError as e:
                logger.warning("PRESIGN batch item failed: file=%s error=%s", f.name, e)
                items.append(BatchPresignItem(file_name=f.name, error=str(e)))
                continue

            items.append(
                BatchPresignItem(
                    file_name=f.name,
                    key=issued.key,
                    presigned_url=issued.upload_url,
                    public_url=issued.public_url,
                    content_type=content_type,
                    file_size=f.size,
                )
            )

        logger.info(
            "PRESIGN batch: folder=%s files=%d failed=%d",
            folder,
            len(items),
            sum(1 for i in items if i.error),
        )
        return BatchPresignResult(
            presigned_urls=items,
            bucket=self._gateway.bucket,
            public_url=self._gateway.public_base_url,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def confirm_upload(self, public_url: str) -> bool:
        """
        Report whether a previously presigned object is actually being served.

        Only URLs under this store's public base are checked.
        """
        if derive_key_from_url(public_url, self._gateway.public_base_url) is None:
            raise ValidationError("URL does not belong to this bucket")

        try:
            resp = requests.head(public_url, timeout=CONFIRM_TIMEOUT_SECONDS, allow_redirects=True)
        except requests.RequestException as e:
            logger.warning("CONFIRM failed: url=%s error=%s", public_url, e)
            return False

        logger.info("CONFIRM: url=%s status=%s", public_url, resp.status_code)
        return resp.status_code == 200
