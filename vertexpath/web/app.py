"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from vertexpath.config import AppConfig
from vertexpath.models import create_session_factory
from vertexpath.profile.engine import AssetUploader, ProfileStore
from vertexpath.profile.errors import (
    ConcurrentSaveError,
    NotReadyError,
    PersistenceError,
    ProfileError,
    UploadError,
    ValidationError,
)
from vertexpath.storage.avatar_uploader import LocalAvatarUploader
from vertexpath.storage.profile_store import SqlProfileStore

from .navigation import router as navigation_router
from .profile import router as profile_router
from .sessions import SessionRegistry

logger = logging.getLogger("vertexpath.web")

_ERROR_STATUS = [
    (ValidationError, 422),
    (ConcurrentSaveError, 409),
    (NotReadyError, 409),
    (UploadError, 502),
    (PersistenceError, 503),
]


async def _profile_error_handler(request: Request, exc: ProfileError):
    status = next((code for kind, code in _ERROR_STATUS if isinstance(exc, kind)), 400)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("VertexPath API starting (identity header: %s)", app.state.config.web.user_header)
    yield
    open_sessions = len(app.state.sessions)
    app.state.sessions.clear()
    logger.info("VertexPath API stopped (%d editing sessions discarded)", open_sessions)


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[ProfileStore] = None,
    uploader: Optional[AssetUploader] = None,
) -> FastAPI:
    config = config or AppConfig()
    app = FastAPI(title="VertexPath", lifespan=lifespan)
    app.state.config = config

    if store is None:
        sql_store = SqlProfileStore(create_session_factory(config.database.url))
        sql_store.create_tables()
        store = sql_store
    if uploader is None:
        uploader = LocalAvatarUploader(
            avatar_dir=config.uploads.avatar_dir,
            public_base_url=config.uploads.public_base_url,
            max_bytes=config.uploads.max_bytes,
        )
    app.state.sessions = SessionRegistry(store, uploader, max_avatar_bytes=config.uploads.max_bytes)

    # Serve stored avatars when their public URL is a path on this app
    base_url = config.uploads.public_base_url.rstrip("/")
    if base_url.startswith("/"):
        avatar_dir = Path(config.uploads.avatar_dir)
        avatar_dir.mkdir(parents=True, exist_ok=True)
        app.mount(base_url, StaticFiles(directory=str(avatar_dir)), name="avatars")

    app.add_exception_handler(ProfileError, _profile_error_handler)

    app.include_router(profile_router)
    app.include_router(navigation_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "sessions": len(app.state.sessions)}

    return app
