"""
Retrieval service — map stored names (or record ids) to files on disk.

Content type always comes from the file extension, never from the MIME type
declared at upload, so previewers keyed on extension get a consistent stream.
Names arrive already percent-decoded once by the router and are not decoded
again here.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError

from docpreview.errors import InvalidFileNameError, RecordNotFoundError, StoredFileNotFoundError
from docpreview.models.file_record import FileRecord
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.storage import LocalStorage

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
}

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def content_type_for(name: str) -> str:
    return CONTENT_TYPES.get(Path(name).suffix.lower(), DEFAULT_CONTENT_TYPE)


@dataclass(frozen=True)
class ResolvedFile:
    path: Path
    content_type: str
    size: int

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class FileInfo:
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


class RetrievalService:
    def __init__(self, store: ManifestStore, storage: LocalStorage):
        self.store = store
        self.storage = storage

    def resolve(self, requested_name: str) -> ResolvedFile:
        try:
            path = self.storage.resolve(requested_name)
        except InvalidFileNameError:
            logger.warning("Rejected file request outside upload root: %r", requested_name)
            raise
        if not path.is_file():
            logger.info("File not found: %s", requested_name)
            raise StoredFileNotFoundError()
        return ResolvedFile(path=path, content_type=content_type_for(path.name), size=path.stat().st_size)

    async def resolve_record(self, record_id: str) -> tuple[FileRecord, ResolvedFile]:
        record = await self.store.get(record_id)
        if record is None:
            raise RecordNotFoundError()
        return record, self.resolve(record.stored_name)

    def inspect(self, requested_name: str) -> FileInfo:
        resolved = self.resolve(requested_name)
        with open(resolved.path, "rb") as f:
            head = f.read(4)

        info = FileInfo(
            stored_name=resolved.name,
            size=resolved.size,
            content_type=resolved.content_type,
            header=head.decode("ascii", errors="replace"),
            first_bytes=" ".join(f"{b:02x}" for b in head),
            is_pdf=head == b"%PDF",
            url=self.storage.get_url(resolved.name),
        )
        if info.is_pdf:
            info.page_count = self._pdf_page_count(resolved.path)
        elif resolved.content_type.startswith("image/"):
            info.width, info.height = self._image_size(resolved.path)
        return info

    def _pdf_page_count(self, path: Path) -> int | None:
        try:
            doc = fitz.open(str(path))
        except Exception as e:
            logger.info("Could not open %s as PDF: %s", path.name, e)
            return None
        try:
            return doc.page_count
        finally:
            doc.close()

    def _image_size(self, path: Path) -> tuple[int | None, int | None]:
        try:
            with Image.open(path) as img:
                return img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            logger.info("Could not read image size for %s: %s", path.name, e)
            return None, None
