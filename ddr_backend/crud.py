"""
Generic CRUD routes shared by every plain document collection.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends

from ddr_backend.db import DocumentStore
from ddr_backend.dependencies import get_document_store
from ddr_backend.resources import Resource
from ddr_backend.schemas import DeleteResponse


def create_crud_router(resource: Resource) -> APIRouter:
    """
    Build list/create/update/delete routes for ``resource`` under its path.

    Update and delete never report a missing document: update returns null and
    delete always acknowledges.
    """
    router = APIRouter(prefix=resource.path, tags=[resource.name])
    collection = resource.collection

    @router.api_route("", methods=["GET", "HEAD"], name=f"list_{collection}")
    def list_documents(store: DocumentStore = Depends(get_document_store)) -> list[dict]:
        return store.find_all(collection)

    @router.post("", name=f"create_{collection}")
    def create_document(
        payload: dict = Body(default={}),
        store: DocumentStore = Depends(get_document_store),
    ) -> dict:
        return store.insert_one(collection, resource.new_document(payload))

    @router.put("/{doc_id}", name=f"update_{collection}")
    def update_document(
        doc_id: str,
        payload: dict = Body(default={}),
        store: DocumentStore = Depends(get_document_store),
    ) -> Optional[dict]:
        return store.update_by_id(collection, doc_id, resource.changes(payload))

    @router.delete("/{doc_id}", name=f"delete_{collection}", response_model=DeleteResponse)
    def delete_document(
        doc_id: str, store: DocumentStore = Depends(get_document_store)
    ) -> DeleteResponse:
        store.delete_by_id(collection, doc_id)
        return DeleteResponse()

    return router
