# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Collection store interface.

The sanitizer never relies on referential constraints from the store;
it only needs to scan named collections and apply bulk writes keyed by
document ID. This ABC is the contract every backend must follow, so
discovery, sanitizers and verification stay backend-agnostic.

Usage:
    from store import connect_store

    store = connect_store(default_config.database)
    user_ids = store.ids('users')
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, Optional, Set


class CollectionStore(ABC):
    """Named collections of documents identified by opaque IDs.

    Contract (Liskov Substitution):
        - Document IDs live under '_id'; ids() returns their string form
        - Bulk writes are atomic per call only, never across calls
        - Methods raise the backend's own errors; callers decide whether
          an error is fatal or per-record
    """

    @abstractmethod
    def find(self, collection: str, projection: Optional[Dict[str, Any]] = None) -> Iterator[dict]:
        """Full collection scan, optionally restricted to projected fields."""
        pass

    @abstractmethod
    def ids(self, collection: str) -> Set[str]:
        """Return the string form of every document ID in a collection."""
        pass

    @abstractmethod
    def delete_by_ids(self, collection: str, doc_ids: Iterable[Any]) -> int:
        """Delete documents whose '_id' is in doc_ids.

        Returns:
            Number of documents deleted
        """
        pass

    @abstractmethod
    def delete_where_in(self, collection: str, field: str, values: Iterable[Any]) -> int:
        """Delete documents whose `field` value is in values.

        Returns:
            Number of documents deleted
        """
        pass

    @abstractmethod
    def update_fields(self, collection: str, doc_id: Any, fields: Dict[str, Any]) -> bool:
        """Set fields on a single document.

        Returns:
            True if a document with doc_id matched
        """
        pass

    @abstractmethod
    def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        pass

    def close(self) -> None:
        """Release connections held by the store."""
        pass
