"""FileRecord model: one manifest entry per uploaded file."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel


class FileRecord(BaseModel):
    """
    Immutable metadata for a stored upload.

    ``original_name`` is for display only and never touches the filesystem;
    ``stored_name`` is the sanitized name on disk. JSON uses camelCase keys.
    """

    id: str
    original_name: str
    stored_name: str
    mime_type: str = "application/octet-stream"
    size: int = 0
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    @computed_field(alias="relativePath")
    @property
    def relative_path(self) -> str:
        return self.stored_name

    @computed_field(alias="url")
    @property
    def url(self) -> str:
        return f"/uploads/{self.stored_name}"
