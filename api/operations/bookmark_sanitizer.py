# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Bookmark sanitizer - deletes bookmarks whose user or article is gone"""
from domain_models import CleanupResult
from operations import reference_policy as policy
from operations.sanitizer_base import SanitizerBase
from operations.valid_id_index import ValidIdIndex


class BookmarkSanitizer(SanitizerBase):
    """Deletes orphaned bookmarks together with their folder links"""

    entity = 'Bookmark'
    operation = 'delete_orphaned_bookmarks'

    def _sanitize(self, index: ValidIdIndex, result: CleanupResult, dry_run: bool) -> None:
        check_user = policy.is_auto_fixable(self.entity, 'userId')
        check_article = policy.is_auto_fixable(self.entity, 'nuggetId')
        orphan_ids = []

        for doc in self.store.find(policy.BOOKMARKS, {'userId': 1, 'nuggetId': 1}):
            result.records_scanned += 1
            if check_user and not index.contains(policy.USERS, doc.get('userId')):
                orphan_ids.append(doc['_id'])
            elif check_article and not index.contains(policy.ARTICLES, doc.get('nuggetId')):
                orphan_ids.append(doc['_id'])

        self._delete_with_links(
            result, policy.BOOKMARKS, orphan_ids,
            link_collection=policy.BOOKMARK_FOLDER_LINKS, link_field='bookmarkId',
            dry_run=dry_run,
        )
