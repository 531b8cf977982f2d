"""
HTTP routes for the site API.
"""

from __future__ import annotations

import logging
from typing import Union

from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from ddr_backend.crud import create_crud_router
from ddr_backend.db import DocumentStore
from ddr_backend.dependencies import get_document_store, get_storage_client
from ddr_backend.resources import CAMPAIGN, CRUD_RESOURCES, DEFAULT_CAMPAIGN, SETTINGS
from ddr_backend.schemas import UploadResponse
from ddr_backend.storage import StorageClient, UnsupportedFileFormatError

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_create(store: DocumentStore, resource, payload: dict) -> dict:
    """
    Return the first document of a singleton collection, creating it from
    ``payload`` when the collection is empty. Two concurrent first reads may
    both insert.
    """
    document = store.find_first(resource.collection)
    if document is None:
        logger.info("Creating default %s document", resource.name)
        document = store.insert_one(
            resource.collection, resource.new_document(payload)
        )
    return document


def _upsert(store: DocumentStore, resource, payload: dict) -> dict:
    return store.upsert_first(
        resource.collection, resource.changes(payload), on_insert=resource.defaults()
    )


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: Union[UploadFile, str, None] = File(None),
    storage: StorageClient = Depends(get_storage_client),
):
    # A plain text field named "file" counts as no upload.
    if not isinstance(file, StarletteUploadFile) or not file.filename:
        return JSONResponse(status_code=400, content={"error": "No file uploaded"})
    try:
        url = storage.save_upload(file.file, file.filename, file.content_type)
    except UnsupportedFileFormatError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    logger.info("Stored upload %s at %s", file.filename, url)
    return UploadResponse(url=url)


@router.api_route("/settings", methods=["GET", "HEAD"])
def get_site_settings(store: DocumentStore = Depends(get_document_store)) -> dict:
    return _get_or_create(store, SETTINGS, {})


@router.put("/settings")
def update_site_settings(
    payload: dict = Body(default={}),
    store: DocumentStore = Depends(get_document_store),
) -> dict:
    return _upsert(store, SETTINGS, payload)


@router.api_route("/campaign", methods=["GET", "HEAD"])
def get_campaign(store: DocumentStore = Depends(get_document_store)) -> dict:
    return _get_or_create(store, CAMPAIGN, DEFAULT_CAMPAIGN)


@router.put("/campaign")
def update_campaign(
    payload: dict = Body(default={}),
    store: DocumentStore = Depends(get_document_store),
) -> dict:
    return _upsert(store, CAMPAIGN, payload)


for _resource in CRUD_RESOURCES:
    router.include_router(create_crud_router(_resource))
