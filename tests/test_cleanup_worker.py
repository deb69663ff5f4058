import os
import time

from docpreview.models.file_record import FileRecord
from docpreview.workers.cleanup_worker import (
    find_dangling_records,
    find_orphan_files,
    prune_orphan_files,
    run_cleanup,
)


async def seed(store, storage):
    storage.ensure_base()
    (storage.base / "kept-1-1.pdf").write_bytes(b"kept")
    (storage.base / "old-2-2.pdf").write_bytes(b"old orphan")
    (storage.base / "new-3-3.pdf").write_bytes(b"new orphan")
    old = time.time() - 3 * 3600
    os.utime(storage.base / "old-2-2.pdf", (old, old))

    await store.append(FileRecord(id="1", original_name="kept.pdf", stored_name="kept-1-1.pdf"))
    await store.append(FileRecord(id="4", original_name="gone.pdf", stored_name="gone-4-4.pdf"))


async def test_find_orphans_and_dangling(store, storage):
    await seed(store, storage)

    assert await find_orphan_files(store, storage) == ["new-3-3.pdf", "old-2-2.pdf"]
    assert [r.id for r in await find_dangling_records(store, storage)] == ["4"]


async def test_prune_only_removes_old_orphans(store, storage):
    await seed(store, storage)

    assert await prune_orphan_files(store, storage, min_age_minutes=60) == ["old-2-2.pdf"]
    assert storage.list_names() == ["kept-1-1.pdf", "new-3-3.pdf"]
    assert len(await store.load()) == 2


def test_missing_upload_dir_has_nothing_to_reconcile(app_settings):
    assert run_cleanup(settings=app_settings) == ([], [], [])
