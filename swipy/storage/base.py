from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from bson import ObjectId

Document = dict[str, Any]
Query = dict[str, Any]
Sort = Sequence[tuple[str, int]]

ASCENDING = 1
DESCENDING = -1


def new_id() -> str:
    """Return a fresh document id (ObjectId hex string)."""
    return str(ObjectId())


class DocumentStore(ABC):
    """
    Minimal document-store client shared by all handlers.

    Queries use the MongoDB filter dialect; ``changes`` are plain field
    assignments (applied as ``$set``).
    """

    @abstractmethod
    def insert_one(self, collection: str, document: Document) -> Document:
        """Insert a document, assigning ``_id`` when absent. Returns the stored document."""

    @abstractmethod
    def insert_unique(self, collection: str, document: Document, fields: Sequence[str]) -> Document | None:
        """
        Insert unless a document with the same values for ``fields`` exists.

        The check and the insert are atomic. Returns the stored document, or
        ``None`` when the values are already taken.
        """

    @abstractmethod
    def find(
        self,
        collection: str,
        query: Query | None = None,
        sort: Sort | None = None,
        limit: int = 0,
    ) -> list[Document]:
        """Return matching documents in storage order unless ``sort`` is given."""

    @abstractmethod
    def find_one(self, collection: str, query: Query) -> Document | None:
        ...

    @abstractmethod
    def update_one(self, collection: str, query: Query, changes: Document) -> Document | None:
        """Apply ``changes`` to the first match and return the updated document."""

    @abstractmethod
    def update_many(self, collection: str, query: Query, changes: Document) -> int:
        """Apply ``changes`` to all matches. Returns the number of modified documents."""

    @abstractmethod
    def delete_one(self, collection: str, query: Query) -> Document | None:
        """Delete the first match and return it."""

    @abstractmethod
    def delete_many(self, collection: str, query: Query) -> int:
        ...

    @abstractmethod
    def count(self, collection: str, query: Query | None = None) -> int:
        ...

    def close(self) -> None:
        pass
