import threading

import pytest

from docpreview.errors import FileTooLargeError, NoFileError, StorageError, UnsupportedTypeError
from docpreview.services.manifest_store import ManifestStore
from docpreview.services.upload_service import UploadService, normalize_mime
from docpreview.utils.storage import LocalStorage

from conftest import make_upload


@pytest.fixture
def service(store, storage, app_settings, id_factory):
    return UploadService(store, storage, app_settings, id_factory)


def test_normalize_mime():
    assert normalize_mime("Image/PNG; charset=binary") == "image/png"
    assert normalize_mime(None) == ""


async def test_save_upload_writes_then_records(service, store, storage):
    record = await service.save_upload(make_upload("café photo.png"))

    assert record.original_name == "café photo.png"
    assert record.stored_name.startswith("cafe_photo-")
    assert record.mime_type == "image/png"
    assert record.size == 10
    assert (storage.base / record.stored_name).read_bytes() == b"0123456789"
    assert await store.load() == [record]


async def test_missing_file(service):
    with pytest.raises(NoFileError):
        await service.save_upload(None)
    with pytest.raises(NoFileError):
        await service.save_upload(make_upload(""))


async def test_unsupported_type_has_no_side_effects(service, store, storage):
    with pytest.raises(UnsupportedTypeError):
        await service.save_upload(make_upload("bundle.zip", content_type="application/zip"))
    assert storage.list_names() == []
    assert await store.load() == []


async def test_declared_size_over_limit(store, storage, app_settings, id_factory):
    app_settings.MAX_UPLOAD_SIZE_MB = 1
    service = UploadService(store, storage, app_settings, id_factory)

    upload = make_upload("big.png", data=b"x" * (1024 * 1024 + 1))
    with pytest.raises(FileTooLargeError, match="Maximum size is 1MB"):
        await service.save_upload(upload)
    assert storage.list_names() == []
    assert await store.load() == []


async def test_undeclared_size_over_limit_stops_while_reading(store, storage, app_settings, id_factory):
    app_settings.MAX_UPLOAD_SIZE_MB = 1
    service = UploadService(store, storage, app_settings, id_factory)

    upload = make_upload("big.png", data=b"x" * (3 * 1024 * 1024), size=None)
    with pytest.raises(FileTooLargeError):
        await service.save_upload(upload)
    assert storage.list_names() == []


async def test_exactly_at_limit_is_accepted(store, storage, app_settings, id_factory):
    app_settings.MAX_UPLOAD_SIZE_MB = 1
    service = UploadService(store, storage, app_settings, id_factory)

    record = await service.save_upload(make_upload("edge.png", data=b"x" * (1024 * 1024)))
    assert record.size == 1024 * 1024


async def test_sequential_uploads_get_distinct_names_and_ids(service, store):
    records = [await service.save_upload(make_upload("same.pdf", content_type="application/pdf")) for _ in range(10)]

    assert len({r.id for r in records}) == 10
    assert len({r.stored_name for r in records}) == 10
    assert [r.id for r in await store.load()] == [r.id for r in records]


class FailingStore(ManifestStore):
    async def append(self, record):
        raise OSError("disk full")


async def test_failed_append_leaves_orphan_and_raises(storage, app_settings, id_factory):
    store = FailingStore(app_settings.MANIFEST_PATH)
    service = UploadService(store, storage, app_settings, id_factory)

    with pytest.raises(StorageError):
        await service.save_upload(make_upload("doc.pdf", content_type="application/pdf"))
    assert len(storage.list_names()) == 1
    assert await store.load() == []


async def test_form_string_instead_of_file(service):
    with pytest.raises(NoFileError):
        await service.save_upload("not a file")


def failing_fsync(fd):
    raise OSError("I/O error")


async def test_failed_write_removes_partial_file(service, store, storage, monkeypatch):
    monkeypatch.setattr("docpreview.utils.storage.os.fsync", failing_fsync)

    with pytest.raises(StorageError):
        await service.save_upload(make_upload("doc.pdf", content_type="application/pdf"))
    assert storage.list_names() == []
    assert await store.load() == []


async def test_overlong_name_is_stored(service, storage):
    record = await service.save_upload(make_upload("a" * 240 + ".png"))

    assert record.original_name == "a" * 240 + ".png"
    assert storage.list_names() == [record.stored_name]


async def test_file_write_runs_off_the_event_loop(storage, monkeypatch):
    loop_thread = threading.get_ident()
    seen = []
    original_write = LocalStorage._write_file

    def tracking_write(self, dest, data):
        seen.append(threading.get_ident())
        original_write(self, dest, data)

    monkeypatch.setattr(LocalStorage, "_write_file", tracking_write)

    await storage.store_bytes(b"abc", "doc-1-1.pdf")
    assert seen and loop_thread not in seen
    assert (storage.base / "doc-1-1.pdf").read_bytes() == b"abc"
