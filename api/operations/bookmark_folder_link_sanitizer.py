# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Bookmark folder link sanitizer

Runs after the bookmark and folder sanitizers, so links left dangling
by their deletes are caught here even if the cascade missed one.
"""
import logging

from domain_models import CleanupResult
from operations import reference_policy as policy
from operations.sanitizer_base import SanitizerBase
from operations.valid_id_index import ValidIdIndex

logger = logging.getLogger(__name__)

# link field -> collection it must point into
LINK_REFERENCES = (
    ('userId', policy.USERS),
    ('bookmarkId', policy.BOOKMARKS),
    ('folderId', policy.BOOKMARK_FOLDERS),
)


class BookmarkFolderLinkSanitizer(SanitizerBase):
    """Deletes links where any of user, bookmark or folder is missing"""

    entity = 'BookmarkFolderLink'
    operation = 'delete_orphaned_links'

    def _sanitize(self, index: ValidIdIndex, result: CleanupResult, dry_run: bool) -> None:
        checks = [
            (field, target) for field, target in LINK_REFERENCES
            if policy.is_auto_fixable(self.entity, field)
        ]
        projection = {field: 1 for field, _ in LINK_REFERENCES}
        orphan_ids = []

        for doc in self.store.find(policy.BOOKMARK_FOLDER_LINKS, projection):
            result.records_scanned += 1
            if any(not index.contains(target, doc.get(field)) for field, target in checks):
                orphan_ids.append(doc['_id'])

        if dry_run:
            result.records_skipped = len(orphan_ids)
            return

        try:
            result.records_cleaned = self.store.delete_by_ids(policy.BOOKMARK_FOLDER_LINKS, orphan_ids)
        except Exception as e:
            logger.error("[Sanitizer] Failed to delete orphaned links: %s", e)
            result.errors.append(f"Failed to delete orphaned links: {e}")
