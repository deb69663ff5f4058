"""File API routes — list, get, download, delete, serve by stored name."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from docpreview.api.responses import no_cache_file_response
from docpreview.dependencies import (
    get_deletion_service,
    get_manifest_store,
    get_retrieval_service,
)
from docpreview.errors import RecordNotFoundError
from docpreview.models.file_record import FileRecord
from docpreview.schemas.common import MessageResponse
from docpreview.schemas.file import FileInfoResponse
from docpreview.services.deletion_service import DeletionService
from docpreview.services.manifest_store import ManifestStore
from docpreview.services.retrieval_service import RetrievalService

router = APIRouter(prefix="/files", tags=["files"])
serve_router = APIRouter(prefix="/file", tags=["files"])


@router.get("", response_model=list[FileRecord])
async def list_files(store: ManifestStore = Depends(get_manifest_store)):
    return await store.load()


@router.get("/{record_id}", response_model=FileRecord)
async def get_file(record_id: str, store: ManifestStore = Depends(get_manifest_store)):
    record = await store.get(record_id)
    if record is None:
        raise RecordNotFoundError()
    return record


@router.get("/{record_id}/download")
async def download_file(
    record_id: str,
    service: RetrievalService = Depends(get_retrieval_service),
):
    record, resolved = await service.resolve_record(record_id)
    return no_cache_file_response(resolved, download_name=record.original_name)


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_file(
    record_id: str,
    service: DeletionService = Depends(get_deletion_service),
):
    await service.delete(record_id)
    return MessageResponse(message="File deleted successfully")


@serve_router.api_route("/{filename}", methods=["GET", "HEAD"])
async def serve_file(
    filename: str,
    service: RetrievalService = Depends(get_retrieval_service),
):
    return no_cache_file_response(service.resolve(filename))


@serve_router.get("/{filename}/info", response_model=FileInfoResponse)
async def file_info(
    filename: str,
    service: RetrievalService = Depends(get_retrieval_service),
):
    return FileInfoResponse(**asdict(service.inspect(filename)))
