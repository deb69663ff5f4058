"""Upload API route."""

from fastapi import APIRouter, Depends, File, UploadFile, status

from docpreview.dependencies import get_upload_service
from docpreview.schemas.common import ErrorResponse
from docpreview.schemas.file import UploadResponse
from docpreview.services.upload_service import UploadService

router = APIRouter(tags=["uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_file(
    file: UploadFile | str | None = File(None),
    service: UploadService = Depends(get_upload_service),
):
    record = await service.save_upload(file)
    return UploadResponse(message="File uploaded successfully", file=record)
