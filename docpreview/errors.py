"""Domain exceptions. Each carries the HTTP status and the message shown to clients."""


class DocPreviewError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ── 4xx: user-correctable ────────────────────────────────

class ValidationError(DocPreviewError):
    status_code = 400
    message = "Invalid request"


class NoFileError(ValidationError):
    message = "No file uploaded"


class UnsupportedTypeError(ValidationError):
    message = "Unsupported file type"


class FileTooLargeError(ValidationError):
    message = "File too large"


class InvalidFileNameError(ValidationError):
    message = "Invalid file name"


class NotFoundError(DocPreviewError):
    status_code = 404
    message = "File not found"


class RecordNotFoundError(NotFoundError):
    pass


class StoredFileNotFoundError(NotFoundError):
    pass


# ── 5xx: not user-correctable ────────────────────────────

class StorageError(DocPreviewError):
    message = "Upload failed"


class DuplicateRecordError(StorageError):
    message = "Duplicate file record"


class ManifestCorruptionError(DocPreviewError):
    """Raised while parsing the manifest. Never surfaced to clients."""

    message = "Manifest is unreadable"
