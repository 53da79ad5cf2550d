# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Valid-ID index for reference validation.

The store enforces no foreign keys, so every phase builds its own view of
which IDs exist. Each referenced collection is queried once and then held
as a set for O(1) membership tests (no per-reference lookups).
"""
import logging
from typing import Dict, Optional, Set

from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)


class ValidIdIndex:
    """Lazily loaded ID sets, one query per referenced collection.

    An index lives for one phase only; build a new one to observe writes
    made after it was loaded.

    Example:
        index = ValidIdIndex(store)
        if not index.contains('users', bookmark['userId']):
            ...
    """

    def __init__(self, store: CollectionStore):
        self.store = store
        self._ids: Dict[str, Set[str]] = {}

    def ids(self, collection: str) -> Set[str]:
        """ID set for a collection, loading it on first access"""
        if collection not in self._ids:
            self._ids[collection] = self.store.ids(collection)
            logger.debug("Loaded %d valid ids from %s", len(self._ids[collection]), collection)
        return self._ids[collection]

    def contains(self, collection: str, value: Optional[object]) -> bool:
        """True if value is the ID of an existing document in collection"""
        if value is None or value == '':
            return False
        return str(value) in self.ids(collection)

    def is_dangling(self, collection: str, value: Optional[object]) -> bool:
        """True for a present, non-empty value that matches no document.

        Missing optional references are not dangling.
        """
        if value is None or value == '':
            return False
        return str(value) not in self.ids(collection)
