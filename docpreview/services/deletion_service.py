"""Deletion service — drop manifest records and, best-effort, their files."""

import logging

from docpreview.errors import InvalidFileNameError, RecordNotFoundError
from docpreview.models.file_record import FileRecord
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.storage import LocalStorage

logger = logging.getLogger(__name__)


class DeletionService:
    def __init__(self, store: ManifestStore, storage: LocalStorage):
        self.store = store
        self.storage = storage

    async def delete(self, record_id: str) -> FileRecord:
        """
        Remove a record. A file that cannot be removed from disk is logged and
        left behind; the manifest entry goes regardless so the listing stays usable.
        """
        record = await self.store.get(record_id)
        if record is None:
            raise RecordNotFoundError()

        try:
            removed = await self.storage.delete(record.stored_name)
        except (OSError, InvalidFileNameError) as e:
            logger.warning("Could not delete file %s for record %s: %s", record.stored_name, record.id, e)
        else:
            if not removed:
                logger.warning("File %s for record %s was already missing", record.stored_name, record.id)

        removed_record = await self.store.remove(record_id)
        logger.info("Deleted record %s (%s)", removed_record.id, removed_record.original_name)
        return removed_record
