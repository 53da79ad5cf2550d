# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Shared plumbing for collection sanitizers

Every sanitizer scans one collection against freshly loaded valid-ID
sets and returns a CleanupResult. Failures never escape: a failure on one
record is appended to `errors` by the subclass, and anything that breaks
the whole pass is captured here as a single error string.
"""
import logging
from typing import Any, Iterable, List

from domain_models import CleanupResult
from operations.valid_id_index import ValidIdIndex
from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)


class SanitizerBase:
    """Template for a single-collection sanitizer.

    Subclasses set `entity`/`operation` and implement `_sanitize`.

    Example:
        result = BookmarkSanitizer(store).sanitize(dry_run=True)
        print(result.records_skipped, "bookmarks would be deleted")
    """

    entity = ''
    operation = ''

    def __init__(self, store: CollectionStore):
        self.store = store

    def sanitize(self, dry_run: bool = True) -> CleanupResult:
        """Scan the collection and repair what policy allows

        Args:
            dry_run: If True, nothing is written and `records_skipped`
                     holds the number of records that would be cleaned

        Returns:
            CleanupResult for this collection
        """
        result = CleanupResult(collection=self.entity, operation=self.operation)
        mode = "DRY RUN" if dry_run else "EXECUTE"
        logger.info("[Sanitizer] %s: %s (%s)", self.entity, self.operation, mode)

        try:
            # Fresh ID sets: earlier sanitizers may have deleted documents
            self._sanitize(ValidIdIndex(self.store), result, dry_run)
        except Exception as e:
            logger.exception("[Sanitizer] %s failed", self.entity)
            result.errors.append(f"Failed to sanitize {self.entity}: {e}")

        logger.info(
            "[Sanitizer] %s: scanned=%d cleaned=%d skipped=%d errors=%d",
            self.entity, result.records_scanned, result.records_cleaned,
            result.records_skipped, len(result.errors)
        )
        return result

    def _sanitize(self, index: ValidIdIndex, result: CleanupResult, dry_run: bool) -> None:
        raise NotImplementedError

    def _count_links(self, link_collection: str, field: str, values: Iterable[Any]) -> int:
        """Count documents whose `field` matches one of `values` (dry-run cascade)"""
        wanted = {str(v) for v in values}
        if not wanted:
            return 0
        return sum(
            1 for doc in self.store.find(link_collection, {field: 1})
            if str(doc.get(field)) in wanted
        )

    def _delete_with_links(self, result: CleanupResult, collection: str, doc_ids: List[Any],
                           link_collection: str, link_field: str, dry_run: bool) -> None:
        """Delete documents, removing links that point at them first

        Links reference parents by string ID, so the cascade matches on
        str(id) while the parent delete matches the stored _id values.
        """
        if not doc_ids:
            return
        link_values = [str(doc_id) for doc_id in doc_ids]

        if dry_run:
            result.records_skipped += len(doc_ids)
            result.details['cascaded_links'] = self._count_links(link_collection, link_field, link_values)
            return

        try:
            result.details['cascaded_links'] = self.store.delete_where_in(
                link_collection, link_field, link_values
            )
            result.records_cleaned += self.store.delete_by_ids(collection, doc_ids)
        except Exception as e:
            logger.error("[Sanitizer] %s: delete failed: %s", self.entity, e)
            result.errors.append(f"Failed to delete {self.entity} records: {e}")
