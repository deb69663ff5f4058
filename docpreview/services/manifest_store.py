"""
Manifest store — the JSON document listing every uploaded file.

The whole document is rewritten on each mutation. Read-modify-write cycles
are serialized on the store's lock; one store instance is shared by every
handler in the process.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from docpreview.errors import DuplicateRecordError, ManifestCorruptionError, RecordNotFoundError
from docpreview.models.file_record import FileRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(list[FileRecord])


class ManifestStore:
    def __init__(self, path: Path, lock: asyncio.Lock | None = None):
        self.path = Path(path)
        self._lock = lock or asyncio.Lock()

    async def load(self) -> list[FileRecord]:
        """All records in upload order. A missing or corrupt manifest reads as empty."""
        try:
            return await asyncio.to_thread(self._read)
        except ManifestCorruptionError as e:
            logger.warning("Ignoring unreadable manifest %s: %s", self.path, e)
            return []

    async def get(self, record_id: str) -> FileRecord | None:
        for record in await self.load():
            if record.id == record_id:
                return record
        return None

    async def append(self, record: FileRecord) -> None:
        async with self._lock:
            records = await self.load()
            if any(r.id == record.id for r in records):
                raise DuplicateRecordError(f"Record id already present: {record.id}")
            records.append(record)
            await asyncio.to_thread(self._write, records)

    async def remove(self, record_id: str) -> FileRecord:
        async with self._lock:
            records = await self.load()
            for idx, record in enumerate(records):
                if record.id == record_id:
                    del records[idx]
                    await asyncio.to_thread(self._write, records)
                    return record
        raise RecordNotFoundError()

    def _read(self) -> list[FileRecord]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestCorruptionError(str(e)) from e

        try:
            return _records_adapter.validate_json(raw)
        except PydanticValidationError as e:
            raise ManifestCorruptionError(f"{e.error_count()} validation error(s)") from e

    def _write(self, records: list[FileRecord]) -> None:
        payload = json.dumps(
            _records_adapter.dump_python(records, mode="json", by_alias=True),
            indent=2,
            ensure_ascii=False,
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
