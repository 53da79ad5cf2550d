# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Document store access for the sanitization system.

- CollectionStore: contract consumed by discovery, sanitizers and verification
- MongoCollectionStore: pymongo implementation
- connect_store: builds a connected store from DatabaseConfig
"""

from .interfaces import CollectionStore
from .mongo_store import MongoCollectionStore
from .connection import StoreConnectionError, connect_store

__all__ = [
    'CollectionStore',
    'MongoCollectionStore',
    'StoreConnectionError',
    'connect_store',
]
