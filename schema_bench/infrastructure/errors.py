"""Store-level exceptions."""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base class for document store failures raised by this package."""


class StoreConnectionError(StoreError):
    """The store could not be reached at startup."""


class MissingDocumentError(StoreError):
    def __init__(self, collection: str, doc_id: Any) -> None:
        super().__init__(f"No document with _id={doc_id!r} in collection '{collection}'")
        self.collection = collection
        self.doc_id = doc_id


__all__ = ["MissingDocumentError", "StoreConnectionError", "StoreError"]
