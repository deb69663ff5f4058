"""Static-style retrieval under /uploads, with the same rules as /api/file."""

from fastapi import APIRouter, Depends

from docpreview.api.responses import no_cache_file_response
from docpreview.dependencies import get_retrieval_service
from docpreview.services.retrieval_service import RetrievalService

router = APIRouter(prefix="/uploads", tags=["media"])


@router.api_route("/{filename:path}", methods=["GET", "HEAD"])
async def serve_upload(
    filename: str,
    service: RetrievalService = Depends(get_retrieval_service),
):
    return no_cache_file_response(service.resolve(filename))
