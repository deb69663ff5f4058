"""Health check endpoint."""

from fastapi import APIRouter, Depends

from docpreview.dependencies import get_manifest_store, get_storage
from docpreview.schemas.file import HealthResponse
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.storage import LocalStorage

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(
    store: ManifestStore = Depends(get_manifest_store),
    storage: LocalStorage = Depends(get_storage),
):
    records = await store.load()
    return HealthResponse(status="ok", upload_dir=storage.base.is_dir(), files=len(records))
