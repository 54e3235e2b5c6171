from __future__ import annotations

import copy
import threading
from collections import defaultdict
from typing import Sequence

from .base import Document, DocumentStore, Query, Sort, new_id
from .query import matches, sort_documents


class MemoryStore(DocumentStore):
    """In-process store for local development and tests.

    Documents keep insertion order; callers always receive copies.
    """

    def __init__(self) -> None:
        self._collections: dict[str, list[Document]] = defaultdict(list)
        self._lock = threading.Lock()

    def insert_one(self, collection: str, document: Document) -> Document:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", new_id())
        with self._lock:
            self._collections[collection].append(stored)
        return copy.deepcopy(stored)

    def insert_unique(self, collection: str, document: Document, fields: Sequence[str]) -> Document | None:
        key = {field: document.get(field) for field in fields}
        stored = copy.deepcopy(document)
        stored.setdefault("_id", new_id())
        with self._lock:
            docs = self._collections[collection]
            if any(matches(d, key) for d in docs):
                return None
            docs.append(stored)
        return copy.deepcopy(stored)

    def find(
        self,
        collection: str,
        query: Query | None = None,
        sort: Sort | None = None,
        limit: int = 0,
    ) -> list[Document]:
        with self._lock:
            found = [d for d in self._collections[collection] if matches(d, query)]
            if sort:
                found = sort_documents(found, sort)
            if limit > 0:
                found = found[:limit]
            return copy.deepcopy(found)

    def find_one(self, collection: str, query: Query) -> Document | None:
        found = self.find(collection, query, limit=1)
        return found[0] if found else None

    def update_one(self, collection: str, query: Query, changes: Document) -> Document | None:
        with self._lock:
            for doc in self._collections[collection]:
                if matches(doc, query):
                    doc.update(copy.deepcopy(changes))
                    return copy.deepcopy(doc)
        return None

    def update_many(self, collection: str, query: Query, changes: Document) -> int:
        modified = 0
        with self._lock:
            for doc in self._collections[collection]:
                if matches(doc, query):
                    before = {k: doc.get(k) for k in changes}
                    doc.update(copy.deepcopy(changes))
                    if before != {k: doc.get(k) for k in changes}:
                        modified += 1
        return modified

    def delete_one(self, collection: str, query: Query) -> Document | None:
        with self._lock:
            docs = self._collections[collection]
            for index, doc in enumerate(docs):
                if matches(doc, query):
                    return docs.pop(index)
        return None

    def delete_many(self, collection: str, query: Query) -> int:
        with self._lock:
            docs = self._collections[collection]
            kept = [d for d in docs if not matches(d, query)]
            deleted = len(docs) - len(kept)
            self._collections[collection] = kept
        return deleted

    def count(self, collection: str, query: Query | None = None) -> int:
        with self._lock:
            return sum(1 for d in self._collections[collection] if matches(d, query))

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()
