# COMPONENT: OBJECT STORE CONFIGURATION
# REQUIREMENTS SATISFIED: immutable storage settings captured once at startup

"""
src/aws/config.py

Reads the R2 / S3-compatible object store settings from the environment.

The settings are captured exactly once, when the application builds its
storage gateway, and are never re-read per request. This keeps a half
configured deployment from flipping between "available" and "unavailable"
while it is running.

Environment Variables:
    R2_ACCOUNT_ID           Cloudflare account id (used to build the endpoint)
    R2_ENDPOINT             Optional explicit endpoint URL (overrides account id)
    R2_ACCESS_KEY_ID        Access key id
    R2_SECRET_ACCESS_KEY    Secret access key
    R2_BUCKET_NAME          Bucket that holds every uploaded asset
    R2_PUBLIC_URL           Public base URL objects are served from
                            (NEXT_PUBLIC_R2_PUBLIC_URL is accepted as fallback)
    LOCAL_STORAGE           "1" switches to the local filesystem gateway
    LOCAL_STORAGE_DIR       Directory used by the local gateway
"""
from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_LOCAL_DIR = "/tmp/local-media"
DEFAULT_LOCAL_PUBLIC_URL = "http://localhost:8000/local-media"


class StorageConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: Optional[str] = None
    endpoint: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    bucket_name: Optional[str] = None
    public_url: str = ""
    region: str = "auto"
    local_mode: bool = False
    local_dir: str = DEFAULT_LOCAL_DIR

    @property
    def endpoint_url(self) -> Optional[str]:
        if self.endpoint:
            return self.endpoint
        if self.account_id:
            return f"https://{self.account_id}.r2.cloudflarestorage.com"
        return None

    @property
    def public_base_url(self) -> str:
        return self.public_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        """True when every value the S3 gateway needs is present."""
        return all(
            (
                self.endpoint_url,
                self.access_key_id,
                self.secret_access_key,
                self.bucket_name,
                self.public_base_url,
            )
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "StorageConfig":
        env = os.environ if env is None else env
        local_mode = env.get("LOCAL_STORAGE", "0") == "1"
        public_url = env.get("R2_PUBLIC_URL") or env.get("NEXT_PUBLIC_R2_PUBLIC_URL") or ""
        if local_mode and not public_url:
            public_url = DEFAULT_LOCAL_PUBLIC_URL

        return cls(
            account_id=env.get("R2_ACCOUNT_ID") or None,
            endpoint=env.get("R2_ENDPOINT") or None,
            access_key_id=env.get("R2_ACCESS_KEY_ID") or None,
            secret_access_key=env.get("R2_SECRET_ACCESS_KEY") or None,
            bucket_name=env.get("R2_BUCKET_NAME") or None,
            public_url=public_url,
            local_mode=local_mode,
            local_dir=env.get("LOCAL_STORAGE_DIR") or DEFAULT_LOCAL_DIR,
        )
