# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
MongoDB implementation of the collection store.

IDs are handed back exactly as stored (usually ObjectId) when documents
are scanned, so bulk deletes can match on '_id' without re-casting.
Reference fields elsewhere hold plain strings, which is why ids()
returns string forms for membership tests.
"""
import logging
from typing import Any, Dict, Iterable, Iterator, Optional, Set

from pymongo.database import Database

from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)


class MongoCollectionStore(CollectionStore):
    """Collection store backed by a pymongo Database"""

    def __init__(self, database: Database, client=None):
        self.db = database
        self.client = client

    def find(self, collection: str, projection: Optional[Dict[str, Any]] = None) -> Iterator[dict]:
        return iter(self.db[collection].find({}, projection))

    def ids(self, collection: str) -> Set[str]:
        cursor = self.db[collection].find({}, {'_id': 1})
        return {str(doc['_id']) for doc in cursor}

    def delete_by_ids(self, collection: str, doc_ids: Iterable[Any]) -> int:
        doc_ids = list(doc_ids)
        if not doc_ids:
            return 0
        result = self.db[collection].delete_many({'_id': {'$in': doc_ids}})
        logger.debug("Deleted %d documents from %s by id", result.deleted_count, collection)
        return result.deleted_count

    def delete_where_in(self, collection: str, field: str, values: Iterable[Any]) -> int:
        values = list(values)
        if not values:
            return 0
        result = self.db[collection].delete_many({field: {'$in': values}})
        logger.debug("Deleted %d documents from %s where %s matched", result.deleted_count, collection, field)
        return result.deleted_count

    def update_fields(self, collection: str, doc_id: Any, fields: Dict[str, Any]) -> bool:
        result = self.db[collection].update_one({'_id': doc_id}, {'$set': fields})
        return result.matched_count > 0

    def count(self, collection: str) -> int:
        return self.db[collection].count_documents({})

    def close(self) -> None:
        """Close the underlying client if this store owns one"""
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("Document store connection closed")
