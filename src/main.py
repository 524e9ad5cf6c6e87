# COMPONENT: FASTAPI APPLICATION ENTRY POINT
# REQUIREMENTS SATISFIED:
#   - API initialization and routing
#   - Middleware configuration (logging + CORS)
#   - Storage gateway and service wiring
#   - AWS Lambda compatibility via Mangum

"""
src/main.py

Application entry point for the media upload service. This module assembles
the FastAPI application, builds the storage gateway and the services that
share it, registers middleware, mounts the routers and exposes the Lambda
handler.

Execution Order:
    1. Environment variables are loaded from .env
    2. Logging is configured from LOG_LEVEL / LOG_FILE
    3. create_app() builds the gateway once and wires the services onto
       app.state
    4. Request logging and CORS middleware are attached
    5. Routers are mounted
    6. The Mangum handler is created for AWS Lambda deployment

The storage gateway is built exactly once per process from a snapshot of
the environment. Tests call create_app() with their own gateway instead.
"""
import os
from typing import Callable, Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from src.api.deps import AuthSettings
from src.api.middleware.log_requests import RequestLogger
from src.api.routers.downloads import router as downloads_router
from src.api.routers.team import router as team_router
from src.api.routers.uploads import router as uploads_router
from src.repositories.team_repo import InMemoryTeamRepo
from src.services.keys import now_millis
from src.services.presign import PresignService
from src.services.storage import StorageGateway, build_storage
from src.services.supersession import SupersessionCoordinator
from src.services.team import TeamService
from src.services.uploads import UploadService
from src.utils.logging import configure_logging

configure_logging()


def _allowed_origins() -> list:
    raw = os.getenv("ALLOWED_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


def create_app(
    storage: Optional[StorageGateway] = None,
    auth: Optional[AuthSettings] = None,
    clock: Callable[[], int] = now_millis,
) -> FastAPI:
    app = FastAPI(title="Media Lifecycle API")

    storage = storage if storage is not None else build_storage()
    coordinator = SupersessionCoordinator(storage)

    app.state.storage = storage
    app.state.auth = auth if auth is not None else AuthSettings.from_env()
    app.state.upload_service = UploadService(storage, clock=clock)
    app.state.presign_service = PresignService(storage, clock=clock)
    app.state.coordinator = coordinator
    app.state.team_service = TeamService(InMemoryTeamRepo(), coordinator, storage.public_base_url)

    app.add_middleware(RequestLogger)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["content-type", "authorization"],
    )

    app.include_router(uploads_router)
    app.include_router(downloads_router)
    app.include_router(team_router)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "storage_available": app.state.storage.is_available()}

    return app


app = create_app()

handler = Mangum(app)
