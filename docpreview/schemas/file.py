"""File upload and inspection response schemas."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from docpreview.models.file_record import FileRecord


class UploadResponse(BaseModel):
    message: str
    file: FileRecord


class FileInfoResponse(BaseModel):
    stored_name: str
    size: int
    content_type: str
    header: str
    first_bytes: str
    is_pdf: bool
    url: str
    page_count: int | None = None
    width: int | None = None
    height: int | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class HealthResponse(BaseModel):
    status: str
    upload_dir: bool
    files: int

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
