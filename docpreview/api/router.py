"""Aggregates all API routers into a single router."""

from fastapi import APIRouter

from docpreview.api.files import router as files_router
from docpreview.api.files import serve_router as file_serve_router
from docpreview.api.health import router as health_router
from docpreview.api.uploads import router as uploads_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(uploads_router)
api_router.include_router(files_router)
api_router.include_router(file_serve_router)
