from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import StoreError
from .base import Document, DocumentStore, Query, Sort, new_id
from .config import DEFAULT_STORE_CONFIG, StoreConfig

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.error("MongoDB %s on '%s' failed: %s", operation, collection, exc)
        raise StoreError(str(exc)) from exc


class MongoStore(DocumentStore):
    """DocumentStore backed by a MongoDB database. Ids are stored as strings."""

    def __init__(
        self,
        config: StoreConfig = DEFAULT_STORE_CONFIG,
        client: MongoClient | None = None,
    ) -> None:
        self._client = client if client is not None else MongoClient(config.mongo_uri, tz_aware=True)
        self._db = self._client[config.database_name]
        self._unique_indexes: set[tuple[str, tuple[str, ...]]] = set()

    def _ensure_unique_index(self, collection: str, fields: Sequence[str]) -> None:
        key = (collection, tuple(fields))
        if key in self._unique_indexes:
            return
        self._db[collection].create_index([(f, ASCENDING) for f in fields], unique=True)
        self._unique_indexes.add(key)

    def insert_one(self, collection: str, document: Document) -> Document:
        stored = dict(document)
        stored.setdefault("_id", new_id())
        with _store_errors("insert", collection):
            self._db[collection].insert_one(stored)
        return stored

    def insert_unique(self, collection: str, document: Document, fields: Sequence[str]) -> Document | None:
        stored = dict(document)
        stored.setdefault("_id", new_id())
        with _store_errors("insert", collection):
            self._ensure_unique_index(collection, fields)
            try:
                self._db[collection].insert_one(stored)
            except DuplicateKeyError:
                return None
        return stored

    def find(
        self,
        collection: str,
        query: Query | None = None,
        sort: Sort | None = None,
        limit: int = 0,
    ) -> list[Document]:
        with _store_errors("find", collection):
            cursor = self._db[collection].find(query or {})
            if sort:
                cursor = cursor.sort(list(sort))
            if limit > 0:
                cursor = cursor.limit(limit)
            return list(cursor)

    def find_one(self, collection: str, query: Query) -> Document | None:
        with _store_errors("find_one", collection):
            return self._db[collection].find_one(query)

    def update_one(self, collection: str, query: Query, changes: Document) -> Document | None:
        with _store_errors("update_one", collection):
            return self._db[collection].find_one_and_update(
                query,
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

    def update_many(self, collection: str, query: Query, changes: Document) -> int:
        with _store_errors("update_many", collection):
            result = self._db[collection].update_many(query, {"$set": changes})
        return result.modified_count

    def delete_one(self, collection: str, query: Query) -> Document | None:
        with _store_errors("delete_one", collection):
            return self._db[collection].find_one_and_delete(query)

    def delete_many(self, collection: str, query: Query) -> int:
        with _store_errors("delete_many", collection):
            result = self._db[collection].delete_many(query)
        return result.deleted_count

    def count(self, collection: str, query: Query | None = None) -> int:
        with _store_errors("count", collection):
            return self._db[collection].count_documents(query or {})

    def close(self) -> None:
        self._client.close()
