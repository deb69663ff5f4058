import io

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import Headers, UploadFile

from docpreview.config import Settings
from docpreview.main import create_app
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.ids import RecordIdFactory
from docpreview.utils.storage import LocalStorage


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        UPLOAD_DIR=tmp_path / "uploads",
        MANIFEST_PATH=tmp_path / "files-list.json",
    )


@pytest.fixture
def store(app_settings):
    return ManifestStore(app_settings.MANIFEST_PATH)


@pytest.fixture
def storage(app_settings):
    return LocalStorage(app_settings.UPLOAD_DIR)


@pytest.fixture
def id_factory():
    return RecordIdFactory()


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as c:
        yield c


def make_upload(filename, data=b"0123456789", content_type="image/png", size="auto"):
    """Build an UploadFile the way the multipart parser hands it to a route."""
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
        size=len(data) if size == "auto" else size,
    )
