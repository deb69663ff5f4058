"""
FastAPI application factory — entry point for the DocPreview backend.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docpreview.api.media import router as media_router
from docpreview.api.router import api_router
from docpreview.config import Settings, settings as default_settings
from docpreview.middleware.error_handler import (
    ErrorHandlerMiddleware,
    RequestIdMiddleware,
    register_exception_handlers,
)
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.ids import RecordIdFactory
from docpreview.utils.storage import LocalStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    app.state.storage.ensure_base()
    app.state.settings.MANIFEST_PATH.parent.mkdir(parents=True, exist_ok=True)

    # Keep new ids ahead of the ones already on record
    records = await app.state.manifest_store.load()
    app.state.id_factory = RecordIdFactory(r.id for r in records)
    logger.info(
        "Serving %d stored files from %s", len(records), app.state.settings.UPLOAD_DIR.resolve()
    )

    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="DocPreview API",
        description="Upload, list, preview and delete documents.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # One store per process; every handler shares it and its lock
    app.state.settings = settings
    app.state.storage = LocalStorage(settings.UPLOAD_DIR)
    app.state.manifest_store = ManifestStore(settings.MANIFEST_PATH)
    app.state.id_factory = RecordIdFactory()

    # ── Middleware (order matters — outermost first) ──────
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Range", "Content-Type", "Content-Disposition"],
    )
    register_exception_handlers(app)

    # ── Routes ───────────────────────────────────────────
    app.include_router(api_router)
    app.include_router(media_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=default_settings.LOG_LEVEL)
    uvicorn.run(
        "docpreview.main:app",
        host=default_settings.BACKEND_HOST,
        port=default_settings.BACKEND_PORT,
        reload=True,
    )
