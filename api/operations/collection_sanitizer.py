# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Collection sanitizer

Trims dangling entries and followers out of Collection documents.
The collection itself is never deleted and `creatorId` is left alone
(CONDITIONAL_CLEANUP): a collection without a valid creator is reported
for manual review instead.
"""
import logging
from typing import List, Tuple

from domain_models import CleanupResult
from operations import reference_policy as policy
from operations.sanitizer_base import SanitizerBase
from operations.valid_id_index import ValidIdIndex

logger = logging.getLogger(__name__)


class CollectionSanitizer(SanitizerBase):
    """Removes invalid entries/followers and resyncs their counters"""

    entity = 'Collection'
    operation = 'remove_invalid_entries_and_followers'

    def _sanitize(self, index: ValidIdIndex, result: CleanupResult, dry_run: bool) -> None:
        fix_entries = (policy.is_auto_fixable(self.entity, 'entries[].articleId')
                       and policy.is_auto_fixable(self.entity, 'entries[].addedByUserId'))
        fix_followers = policy.is_auto_fixable(self.entity, 'followers[]')
        entries_removed = 0
        followers_removed = 0

        for doc in self.store.find(policy.COLLECTIONS, {'entries': 1, 'followers': 1}):
            result.records_scanned += 1
            entries = doc.get('entries') or []
            followers = doc.get('followers') or []
            update = {}

            kept_entries = entries
            if fix_entries:
                kept_entries, dropped = self._split_entries(index, entries)
                if dropped:
                    update['entries'] = kept_entries
                    entries_removed += dropped

            kept_followers = followers
            if fix_followers:
                kept_followers = [f for f in followers if index.contains(policy.USERS, f)]
                if len(kept_followers) != len(followers):
                    update['followers'] = kept_followers
                    followers_removed += len(followers) - len(kept_followers)

            if not update:
                continue
            # Counters track the retained arrays
            update['validEntriesCount'] = len(kept_entries)
            update['followersCount'] = len(kept_followers)
            if dry_run:
                result.records_skipped += 1
                continue

            try:
                if self.store.update_fields(policy.COLLECTIONS, doc['_id'], update):
                    result.records_cleaned += 1
            except Exception as e:
                logger.error("[Sanitizer] Failed to update collection %s: %s", doc['_id'], e)
                result.errors.append(f"Failed to update collection {doc['_id']}: {e}")

        result.details['entries_removed'] = entries_removed
        result.details['followers_removed'] = followers_removed

    def _split_entries(self, index: ValidIdIndex, entries: List[dict]) -> Tuple[List[dict], int]:
        """Keep entries whose article and adding user both exist"""
        kept = [
            entry for entry in entries
            if index.contains(policy.ARTICLES, entry.get('articleId'))
            and index.contains(policy.USERS, entry.get('addedByUserId'))
        ]
        return kept, len(entries) - len(kept)
