# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Entry-count backfill

Older collections predate the `validEntriesCount` field. This sets it
to the current number of entries wherever it is missing or null, without
touching the entries themselves.
"""
import logging

from domain_models import CleanupResult
from operations import reference_policy as policy
from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)


class EntryCountBackfiller:
    """Fills in missing validEntriesCount on collections

    Example:
        result = EntryCountBackfiller(store).backfill(dry_run=True)
        print(f"{result.records_skipped} collections need a count")
    """

    def __init__(self, store: CollectionStore):
        self.store = store

    def backfill(self, dry_run: bool = True) -> CleanupResult:
        result = CleanupResult(collection='Collection', operation='backfill_valid_entries_count')

        for doc in self.store.find(policy.COLLECTIONS, {'entries': 1, 'validEntriesCount': 1}):
            result.records_scanned += 1
            if doc.get('validEntriesCount') is not None:
                continue
            if dry_run:
                result.records_skipped += 1
                continue
            try:
                count = len(doc.get('entries') or [])
                if self.store.update_fields(policy.COLLECTIONS, doc['_id'], {'validEntriesCount': count}):
                    result.records_cleaned += 1
            except Exception as e:
                logger.error("Failed to backfill count for collection %s: %s", doc['_id'], e)
                result.errors.append(f"Failed to backfill collection {doc['_id']}: {e}")

        logger.info(
            "[Backfill] scanned=%d updated=%d pending=%d",
            result.records_scanned, result.records_cleaned, result.records_skipped
        )
        return result
