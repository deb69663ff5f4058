"""FastAPI dependency injection — process-wide store, storage and services."""

from fastapi import Depends, Request

from docpreview.config import Settings
from docpreview.services.deletion_service import DeletionService
from docpreview.services.manifest_store import ManifestStore
from docpreview.services.retrieval_service import RetrievalService
from docpreview.services.upload_service import UploadService
from docpreview.utils.ids import RecordIdFactory
from docpreview.utils.storage import LocalStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_manifest_store(request: Request) -> ManifestStore:
    return request.app.state.manifest_store


def get_storage(request: Request) -> LocalStorage:
    return request.app.state.storage


def get_id_factory(request: Request) -> RecordIdFactory:
    return request.app.state.id_factory


def get_upload_service(
    store: ManifestStore = Depends(get_manifest_store),
    storage: LocalStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    id_factory: RecordIdFactory = Depends(get_id_factory),
) -> UploadService:
    return UploadService(store, storage, settings, id_factory)


def get_retrieval_service(
    store: ManifestStore = Depends(get_manifest_store),
    storage: LocalStorage = Depends(get_storage),
) -> RetrievalService:
    return RetrievalService(store, storage)


def get_deletion_service(
    store: ManifestStore = Depends(get_manifest_store),
    storage: LocalStorage = Depends(get_storage),
) -> DeletionService:
    return DeletionService(store, storage)
