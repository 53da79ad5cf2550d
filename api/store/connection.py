# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Document store connection management.

A failed connection is fatal for a sanitization run, so every driver
error raised while connecting is surfaced as StoreConnectionError.
"""
import logging
from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from config import DatabaseConfig
from store.mongo_store import MongoCollectionStore

logger = logging.getLogger(__name__)


class StoreConnectionError(Exception):
    """Could not connect to the document store"""
    pass


def connect_store(config: DatabaseConfig, client_factory: Optional[Callable] = None) -> MongoCollectionStore:
    """Connect to the configured database and verify the server answers.

    Args:
        config: Database configuration (URI and database name)
        client_factory: MongoClient-compatible callable (tests pass mongomock)

    Returns:
        Connected MongoCollectionStore that owns the client

    Raises:
        StoreConnectionError: If no URI is configured or the server is unreachable
    """
    if not config.is_configured:
        raise StoreConnectionError("MONGO_URI or MONGODB_URI environment variable is required")

    factory = client_factory or MongoClient
    try:
        client = factory(config.uri, serverSelectionTimeoutMS=config.server_selection_timeout_ms)
        client.server_info()
    except PyMongoError as e:
        logger.error("Failed to connect to document store: %s", e)
        raise StoreConnectionError(f"Failed to connect to document store: {e}") from e

    logger.info("Connected to document store (database: %s)", config.database)
    return MongoCollectionStore(client[config.database], client=client)
