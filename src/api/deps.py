"""Request-scoped accessors for services held on app.state, plus the admin guard."""

from __future__ import annotations

import hmac
import os
from typing import Mapping, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict

from src.api.errors import http_error
from src.errors import Unauthorized
from src.services.presign import PresignService
from src.services.storage import StorageGateway
from src.services.supersession import SupersessionCoordinator
from src.services.team import TeamService
from src.services.uploads import UploadService

security = HTTPBearer(auto_error=False)


class AuthSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    admin_token: Optional[str] = None
    disabled: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AuthSettings":
        env = os.environ if env is None else env
        return cls(
            admin_token=env.get("ADMIN_API_TOKEN") or None,
            disabled=env.get("UPLOAD_DISABLE_AUTH", "").lower() == "true",
        )


def get_storage(request: Request) -> StorageGateway:
    return request.app.state.storage


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_presign_service(request: Request) -> PresignService:
    return request.app.state.presign_service


def get_coordinator(request: Request) -> SupersessionCoordinator:
    return request.app.state.coordinator


def get_team_service(request: Request) -> TeamService:
    return request.app.state.team_service


def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """
    Accept the request only with `Authorization: Bearer <ADMIN_API_TOKEN>`.

    With no token configured every admin call is rejected unless
    UPLOAD_DISABLE_AUTH=true.
    """
    settings: AuthSettings = request.app.state.auth
    if settings.disabled:
        return
    if credentials is None or not settings.admin_token:
        raise http_error(Unauthorized("Unauthorized"))
    if not hmac.compare_digest(credentials.credentials.encode(), settings.admin_token.encode()):
        raise http_error(Unauthorized("Unauthorized"))
