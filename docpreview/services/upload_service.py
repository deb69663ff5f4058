"""Upload service — validate incoming files, store them, record them in the manifest."""

import logging
from collections.abc import Callable

from fastapi import UploadFile

from docpreview.config import Settings
from docpreview.errors import (
    FileTooLargeError,
    NoFileError,
    StorageError,
    UnsupportedTypeError,
)
from docpreview.models.file_record import FileRecord
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.filenames import make_stored_name
from docpreview.utils.storage import LocalStorage

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


def normalize_mime(content_type: str | None) -> str:
    """Drop parameters such as ``; charset=...`` and lower-case the type."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class UploadService:
    def __init__(
        self,
        store: ManifestStore,
        storage: LocalStorage,
        settings: Settings,
        next_id: Callable[[], str],
    ):
        self.store = store
        self.storage = storage
        self.settings = settings
        self.next_id = next_id

    def validate(self, file: UploadFile | str | None) -> str:
        """Check presence, declared type and declared size. Returns the normalized MIME type."""
        # A part sent without a filename arrives as a plain form string
        if file is None or isinstance(file, str) or not file.filename:
            raise NoFileError()

        mime = normalize_mime(file.content_type)
        allowed = {normalize_mime(m) for m in self.settings.ALLOWED_MIME_TYPES}
        if mime not in allowed:
            logger.info("Rejected upload %r: unsupported type %r", file.filename, mime)
            raise UnsupportedTypeError()

        if file.size is not None and file.size > self.settings.max_upload_bytes:
            raise self._too_large(file.filename)
        return mime

    async def read_limited(self, file: UploadFile) -> bytes:
        """Read the payload in chunks, bailing out as soon as it passes the size limit."""
        limit = self.settings.max_upload_bytes
        chunks = []
        total = 0
        while True:
            chunk = await file.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            total += len(chunk)
            if total > limit:
                raise self._too_large(file.filename)
            chunks.append(chunk)
        return b"".join(chunks)

    async def save_upload(self, file: UploadFile | str | None) -> FileRecord:
        """Validate and store an uploaded file, returning its manifest record."""
        mime = self.validate(file)
        data = await self.read_limited(file)

        stored_name = make_stored_name(file.filename)
        try:
            await self.storage.store_bytes(data, stored_name)
        except OSError as e:
            logger.error("Failed to write upload %r as %s: %s", file.filename, stored_name, e)
            raise StorageError() from e

        record = FileRecord(
            id=self.next_id(),
            original_name=file.filename,
            stored_name=stored_name,
            mime_type=mime,
            size=len(data),
        )
        try:
            await self.store.append(record)
        except Exception as e:
            # The bytes are on disk but unreferenced; reconciliation picks them up
            logger.error("Manifest append failed, orphaned file %s: %s", stored_name, e)
            raise StorageError() from e

        logger.info("Stored upload %r as %s (%d bytes)", record.original_name, stored_name, record.size)
        return record

    def _too_large(self, filename: str) -> FileTooLargeError:
        logger.info("Rejected upload %r: larger than %d MB", filename, self.settings.MAX_UPLOAD_SIZE_MB)
        return FileTooLargeError(
            f"File too large. Maximum size is {self.settings.MAX_UPLOAD_SIZE_MB}MB."
        )
