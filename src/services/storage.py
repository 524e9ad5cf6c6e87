# COMPONENT: STORAGE GATEWAY SELECTION
# REQUIREMENTS SATISFIED: injected storage gateway, local development fallback

"""
src/services/storage.py

Chooses and builds the storage gateway the rest of the application uses.

Two gateways share the same surface (put, delete, presign_put, get,
is_available, public_base_url, bucket):

    - R2Gateway (src/aws/s3_utils.py) for deployed environments
    - LocalStorageGateway for development, selected with LOCAL_STORAGE=1

The gateway is built once at application startup and handed to the services
that need it. Nothing here caches a client in a module global, so tests can
pass in a fake gateway instead of patching environment variables.
"""
from __future__ import annotations

import logging
import os
import shutil
from typing import Optional, Protocol

from src.aws.config import StorageConfig
from src.aws.s3_utils import Body, R2Gateway, StoredObject
from src.errors import StorageReadError, StorageWriteError, ValidationError

logger = logging.getLogger("media_lifecycle")


class StorageGateway(Protocol):
    @property
    def public_base_url(self) -> str: ...

    @property
    def bucket(self) -> Optional[str]: ...

    def is_available(self) -> bool: ...

    def put(self, key: str, body: Body, content_type: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def presign_put(
        self,
        key: str,
        content_type: str,
        ttl_seconds: int = ...,
        content_length: Optional[int] = ...,
    ) -> str: ...

    def get(self, key: str) -> Optional[StoredObject]: ...


# -------- LOCAL STORAGE FALLBACK --------
class LocalStorageGateway:
    def __init__(self, root: str, public_base_url: str):
        self._root = root
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def public_base_url(self) -> str:
        return self._public_base_url

    @property
    def bucket(self) -> Optional[str]:
        # the root directory plays the bucket role
        return os.path.basename(os.path.normpath(self._root))

    def is_available(self) -> bool:
        return True

    def _path(self, key: str) -> str:
        path = os.path.normpath(os.path.join(self._root, key))
        if not path.startswith(os.path.normpath(self._root) + os.sep):
            raise ValidationError(f"Refusing key outside storage root: {key}")
        return path

    def put(self, key: str, body: Body, content_type: str) -> None:
        path = self._path(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                if isinstance(body, (bytes, bytearray)):
                    f.write(body)
                else:
                    shutil.copyfileobj(body, f)
            with open(path + ".content-type", "w", encoding="utf-8") as f:
                f.write(content_type)
        except OSError as exc:
            raise StorageWriteError(f"Failed to store {key}: {exc}") from exc
        logger.info("LOCAL put: key=%s", key)

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            for p in (path, path + ".content-type"):
                if os.path.exists(p):
                    os.remove(p)
        except OSError as exc:
            raise StorageWriteError(f"Failed to delete {key}: {exc}") from exc
        logger.info("LOCAL delete: key=%s", key)

    def presign_put(self, key, content_type, ttl_seconds=3600, content_length=None) -> str:
        return f"local://upload/{key}"

    def get(self, key: str) -> Optional[StoredObject]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "rb") as f:
                data = f.read()
            content_type = "application/octet-stream"
            if os.path.exists(path + ".content-type"):
                with open(path + ".content-type", encoding="utf-8") as f:
                    content_type = f.read().strip() or content_type
        except OSError as exc:
            raise StorageReadError(f"Failed to read {key}: {exc}") from exc
        return StoredObject(data, content_type)


# -------- PUBLIC API --------
def build_storage(config: Optional[StorageConfig] = None) -> StorageGateway:
    """Build the gateway for this process from an immutable config snapshot."""
    config = config or StorageConfig.from_env()
    if config.local_mode:
        logger.info("Using local storage at %s", config.local_dir)
        return LocalStorageGateway(config.local_dir, config.public_base_url)
    return R2Gateway(config)
