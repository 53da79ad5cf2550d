# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

from domain_models import CleanupResult
from operations import reference_policy as policy
from operations.sanitizer_base import SanitizerBase
from operations.valid_id_index import ValidIdIndex


class BookmarkFolderSanitizer(SanitizerBase):
    """Deletes folders owned by missing users, links first"""

    entity = 'BookmarkFolder'
    operation = 'delete_orphaned_folders'

    def _sanitize(self, index: ValidIdIndex, result: CleanupResult, dry_run: bool) -> None:
        if not policy.is_auto_fixable(self.entity, 'userId'):
            return

        orphan_ids = []
        for doc in self.store.find(policy.BOOKMARK_FOLDERS, {'userId': 1}):
            result.records_scanned += 1
            if not index.contains(policy.USERS, doc.get('userId')):
                orphan_ids.append(doc['_id'])

        self._delete_with_links(
            result, policy.BOOKMARK_FOLDERS, orphan_ids,
            link_collection=policy.BOOKMARK_FOLDER_LINKS, link_field='folderId',
            dry_run=dry_run,
        )
