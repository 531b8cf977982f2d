"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from ddr_backend.config import get_settings
from ddr_backend.db import DocumentStore, InMemoryDocumentStore, SqlDocumentStore
from ddr_backend.storage import (
    InMemoryStorageClient,
    LocalStorageClient,
    S3StorageClient,
    StorageClient,
)

logger = logging.getLogger(__name__)

UPLOADS_URL_PATH = "/uploads"

_document_store: DocumentStore | None = None
_storage_client: StorageClient | None = None


def get_document_store() -> DocumentStore:
    """
    Return a singleton document store so state persists across requests.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("Using in-memory document store")
        _document_store = InMemoryDocumentStore()
    else:
        logger.info("Using SQL document store")
        _document_store = SqlDocumentStore(settings.database_url)
    return _document_store


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient()
    elif not settings.storage_bucket:
        _storage_client = LocalStorageClient(
            directory=settings.upload_dir, url_prefix=UPLOADS_URL_PATH
        )
    else:
        _storage_client = S3StorageClient(
            bucket=settings.storage_bucket,
            region=settings.storage_region or "",
            endpoint=settings.storage_endpoint or "",
            access_key_id=settings.storage_access_key_id or "",
            secret_access_key=settings.storage_secret_access_key or "",
            folder=settings.storage_folder,
            public_base_url=settings.storage_public_base_url or "",
        )
    logger.info("Storage client: %s", _storage_client.__class__.__name__)
    return _storage_client
