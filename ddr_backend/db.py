"""
Document store abstraction backed by SQLAlchemy, plus an in-memory implementation.

Documents are schemaless JSON objects grouped by collection name. Each one gets
a storage-assigned hex identifier and is ordered by insertion.
"""

from __future__ import annotations

import copy
import re
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Protocol

from sqlalchemy import JSON, Column, Integer, String, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class DocumentStoreError(Exception):
    """Any fault raised by the document store."""


class InvalidDocumentIdError(DocumentStoreError):
    pass


class DocumentValidationError(DocumentStoreError):
    """A payload value could not be coerced to its declared type."""


class DocumentStore(Protocol):
    """Per-collection operations the API needs from the database."""

    def insert_one(self, collection: str, data: dict) -> dict:
        ...

    def find_all(self, collection: str) -> list[dict]:
        ...

    def find_first(self, collection: str) -> Optional[dict]:
        ...

    def upsert_first(
        self, collection: str, fields: dict, on_insert: Optional[dict] = None
    ) -> dict:
        ...

    def update_by_id(self, collection: str, doc_id: str, fields: dict) -> Optional[dict]:
        ...

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        ...


def new_document_id() -> str:
    return uuid.uuid4().hex


def check_document_id(doc_id: str) -> str:
    if not isinstance(doc_id, str) or not _ID_PATTERN.match(doc_id):
        raise InvalidDocumentIdError(f'Cast to id failed for value "{doc_id}"')
    return doc_id


def serialize(doc_id: str, data: dict) -> dict:
    """Expose the business fields plus the public id."""
    document = copy.deepcopy(data)
    document["id"] = doc_id
    return document


class InMemoryDocumentStore:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.collections: Dict[str, "OrderedDict[str, dict]"] = {}

    def _collection(self, name: str) -> "OrderedDict[str, dict]":
        return self.collections.setdefault(name, OrderedDict())

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()

    def insert_one(self, collection: str, data: dict) -> dict:
        doc_id = new_document_id()
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return serialize(doc_id, data)

    def find_all(self, collection: str) -> list[dict]:
        docs = self._collection(collection)
        return [serialize(doc_id, data) for doc_id, data in reversed(docs.items())]

    def find_first(self, collection: str) -> Optional[dict]:
        docs = self._collection(collection)
        for doc_id, data in docs.items():
            return serialize(doc_id, data)
        return None

    def upsert_first(
        self, collection: str, fields: dict, on_insert: Optional[dict] = None
    ) -> dict:
        docs = self._collection(collection)
        for doc_id, data in docs.items():
            data.update(copy.deepcopy(fields))
            return serialize(doc_id, data)
        return self.insert_one(collection, {**(on_insert or {}), **fields})

    def update_by_id(self, collection: str, doc_id: str, fields: dict) -> Optional[dict]:
        check_document_id(doc_id)
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        data.update(copy.deepcopy(fields))
        return serialize(doc_id, data)

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        check_document_id(doc_id)
        self._collection(collection).pop(doc_id, None)


class SqlDocumentStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDocumentStore")
        engine_kwargs = {"future": True, "pool_pre_ping": True, "pool_recycle": 1800}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # One shared connection so every request thread sees the same database.
            engine_kwargs.update(
                poolclass=StaticPool, connect_args={"check_same_thread": False}
            )
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.Session() as session:
                yield session
        except SQLAlchemyError as exc:
            raise DocumentStoreError(str(exc)) from exc

    def _first(self, session: Session, collection: str) -> Optional["DocumentRow"]:
        stmt = (
            select(DocumentRow)
            .where(DocumentRow.collection == collection)
            .order_by(DocumentRow.seq.asc())
            .limit(1)
        )
        return session.execute(stmt).scalar_one_or_none()

    def _find(self, session: Session, collection: str, doc_id: str) -> Optional["DocumentRow"]:
        stmt = select(DocumentRow).where(
            DocumentRow.collection == collection, DocumentRow.id == doc_id
        )
        return session.execute(stmt).scalar_one_or_none()

    def _insert(self, session: Session, collection: str, data: dict) -> "DocumentRow":
        row = DocumentRow(
            id=new_document_id(),
            collection=collection,
            data=copy.deepcopy(data),
        )
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def insert_one(self, collection: str, data: dict) -> dict:
        with self._session() as session:
            row = self._insert(session, collection, data)
            return serialize(row.id, row.data)

    def find_all(self, collection: str) -> list[dict]:
        with self._session() as session:
            stmt = (
                select(DocumentRow)
                .where(DocumentRow.collection == collection)
                .order_by(DocumentRow.seq.desc())
            )
            rows = session.execute(stmt).scalars().all()
            return [serialize(row.id, row.data) for row in rows]

    def find_first(self, collection: str) -> Optional[dict]:
        with self._session() as session:
            row = self._first(session, collection)
            return serialize(row.id, row.data) if row else None

    def upsert_first(
        self, collection: str, fields: dict, on_insert: Optional[dict] = None
    ) -> dict:
        with self._session() as session:
            row = self._first(session, collection)
            if row is None:
                row = self._insert(session, collection, {**(on_insert or {}), **fields})
            else:
                row.data = {**row.data, **copy.deepcopy(fields)}
                session.commit()
            return serialize(row.id, row.data)

    def update_by_id(self, collection: str, doc_id: str, fields: dict) -> Optional[dict]:
        check_document_id(doc_id)
        with self._session() as session:
            row = self._find(session, collection, doc_id)
            if row is None:
                return None
            row.data = {**row.data, **copy.deepcopy(fields)}
            session.commit()
            return serialize(row.id, row.data)

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        check_document_id(doc_id)
        with self._session() as session:
            row = self._find(session, collection, doc_id)
            if row is not None:
                session.delete(row)
                session.commit()


Base = declarative_base()


class DocumentRow(Base):
    __tablename__ = "documents"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True, index=True)
    collection = Column(String, nullable=False, index=True)
    data = Column(JSON, nullable=False)
