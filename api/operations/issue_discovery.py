# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Issue discovery (read-only audit)

Scans every managed collection for reference fields pointing at
documents that no longer exist, and classifies each finding with the
risk policy. No data is modified.

Referenced ID sets are loaded once per discovery pass through
ValidIdIndex, then every document is checked in memory.
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

from domain_models import IssueType, SanitizationIssue
from operations import reference_policy as policy
from operations.valid_id_index import ValidIdIndex
from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)


def get_path(doc: dict, path: str) -> Any:
    """Read a dotted field path ('reporter.id') from a document"""
    value: Any = doc
    for part in path.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


class IssueTally:
    """Accumulates violations for one (entity, field) pair"""

    def __init__(self, entity: str, field: str, description: str,
                 issue_type: IssueType = IssueType.ORPHANED_REFERENCE, sample_size: int = 5):
        self.entity = entity
        self.field = field
        self.description = description
        self.issue_type = issue_type
        self.sample_size = sample_size
        self.count = 0
        self.sample_ids: List[str] = []
        self.sample_references: List[str] = []

    def record(self, doc_id: Any, reference: Any = None, occurrences: int = 1):
        """Count a violation and keep a capped, de-duplicated sample"""
        self.count += occurrences
        doc_id = str(doc_id)
        if doc_id not in self.sample_ids and len(self.sample_ids) < self.sample_size:
            self.sample_ids.append(doc_id)
        if reference not in (None, '') and len(self.sample_references) < self.sample_size:
            self.sample_references.append(str(reference))

    def to_issue(self) -> Optional[SanitizationIssue]:
        """Build the issue, or None when nothing was recorded"""
        if self.count == 0:
            return None
        details = {}
        if self.sample_references:
            details['sampleReferenceIds'] = list(self.sample_references)
        note = policy.policy_note(self.entity, self.field)
        if note:
            details['note'] = note
        return SanitizationIssue(
            collection=self.entity,
            issue_type=self.issue_type,
            description=self.description,
            count=self.count,
            sample_ids=list(self.sample_ids),
            category=policy.risk_tier(self.entity, self.field),
            field=self.field,
            details=details,
        )


class IssueDiscovery:
    """Read-only scan of every managed collection.

    Example:
        discovery = IssueDiscovery(store)
        issues = discovery.discover_all_issues()
    """

    def __init__(self, store: CollectionStore, sample_size: int = 5):
        self.store = store
        self.sample_size = sample_size
        self._index: Optional[ValidIdIndex] = None

    def discover_all_issues(self) -> List[SanitizationIssue]:
        """Run every collection scan against one shared ID index"""
        logger.info("[Discovery] Starting database audit...")
        issues: List[SanitizationIssue] = []
        self._index = ValidIdIndex(self.store)
        try:
            for name, scan in self._scanners():
                logger.info("[Discovery] Scanning %s...", name)
                issues.extend(scan())
        finally:
            # ID sets are only valid for this pass
            self._index = None
        logger.info("[Discovery] Audit complete. Found %d issue types.", len(issues))
        return issues

    def _scanners(self) -> List[Tuple[str, Callable[[], List[SanitizationIssue]]]]:
        return [
            ('Collections', self.discover_collection_issues),
            ('Bookmarks', self.discover_bookmark_issues),
            ('BookmarkFolders', self.discover_bookmark_folder_issues),
            ('BookmarkFolderLinks', self.discover_bookmark_folder_link_issues),
            ('Articles', self.discover_article_issues),
            ('Reports', self.discover_report_issues),
            ('ModerationAuditLog', self.discover_moderation_audit_log_issues),
            ('Feedback', self.discover_feedback_issues),
        ]

    @property
    def index(self) -> ValidIdIndex:
        """Shared index during discover_all_issues, fresh one otherwise"""
        if self._index is None:
            return ValidIdIndex(self.store)
        return self._index

    def _tally(self, entity: str, field: str, description: str,
               issue_type: IssueType = IssueType.ORPHANED_REFERENCE) -> IssueTally:
        return IssueTally(entity, field, description, issue_type, self.sample_size)

    def _collect(self, *tallies: IssueTally) -> List[SanitizationIssue]:
        return [issue for issue in (t.to_issue() for t in tallies) if issue is not None]

    def discover_collection_issues(self) -> List[SanitizationIssue]:
        """Dangling creators, followers and entry references in Collections"""
        index = self.index
        creator = self._tally('Collection', 'creatorId', 'Collections with non-existent creatorId')
        followers = self._tally('Collection', 'followers[]', 'Collections with non-existent followers')
        articles = self._tally('Collection', 'entries[].articleId',
                               'Collection entries referencing non-existent articles')
        adders = self._tally('Collection', 'entries[].addedByUserId',
                             'Collection entries referencing non-existent users (addedByUserId)')

        for doc in self.store.find(policy.COLLECTIONS):
            doc_id = doc['_id']
            if index.is_dangling(policy.USERS, doc.get('creatorId')):
                creator.record(doc_id, doc.get('creatorId'))
            for follower_id in doc.get('followers') or []:
                if not index.contains(policy.USERS, follower_id):
                    followers.record(doc_id, follower_id)
            for entry in doc.get('entries') or []:
                if not index.contains(policy.ARTICLES, entry.get('articleId')):
                    articles.record(doc_id, entry.get('articleId'))
                if not index.contains(policy.USERS, entry.get('addedByUserId')):
                    adders.record(doc_id, entry.get('addedByUserId'))

        return self._collect(articles, adders, creator, followers)

    def discover_bookmark_issues(self) -> List[SanitizationIssue]:
        """Bookmarks whose user or article is gone"""
        index = self.index
        users = self._tally('Bookmark', 'userId', 'Bookmarks referencing non-existent users')
        articles = self._tally('Bookmark', 'nuggetId', 'Bookmarks referencing non-existent articles')

        for doc in self.store.find(policy.BOOKMARKS, {'userId': 1, 'nuggetId': 1}):
            if not index.contains(policy.USERS, doc.get('userId')):
                users.record(doc['_id'], doc.get('userId'))
            if not index.contains(policy.ARTICLES, doc.get('nuggetId')):
                articles.record(doc['_id'], doc.get('nuggetId'))

        return self._collect(users, articles)

    def discover_bookmark_folder_issues(self) -> List[SanitizationIssue]:
        """Bookmark folders whose owner is gone"""
        index = self.index
        users = self._tally('BookmarkFolder', 'userId', 'Bookmark folders referencing non-existent users')

        for doc in self.store.find(policy.BOOKMARK_FOLDERS, {'userId': 1}):
            if not index.contains(policy.USERS, doc.get('userId')):
                users.record(doc['_id'], doc.get('userId'))

        return self._collect(users)

    def discover_bookmark_folder_link_issues(self) -> List[SanitizationIssue]:
        """Links with any dangling side (user, bookmark or folder)"""
        index = self.index
        link = IssueType.ORPHANED_LINK
        users = self._tally('BookmarkFolderLink', 'userId',
                            'Bookmark folder links referencing non-existent users', link)
        bookmarks = self._tally('BookmarkFolderLink', 'bookmarkId',
                                'Bookmark folder links referencing non-existent bookmarks', link)
        folders = self._tally('BookmarkFolderLink', 'folderId',
                              'Bookmark folder links referencing non-existent folders', link)

        projection = {'userId': 1, 'bookmarkId': 1, 'folderId': 1}
        for doc in self.store.find(policy.BOOKMARK_FOLDER_LINKS, projection):
            if not index.contains(policy.USERS, doc.get('userId')):
                users.record(doc['_id'], doc.get('userId'))
            if not index.contains(policy.BOOKMARKS, doc.get('bookmarkId')):
                bookmarks.record(doc['_id'], doc.get('bookmarkId'))
            if not index.contains(policy.BOOKMARK_FOLDERS, doc.get('folderId')):
                folders.record(doc['_id'], doc.get('folderId'))

        return self._collect(users, bookmarks, folders)

    def discover_article_issues(self) -> List[SanitizationIssue]:
        """Articles with a dangling author or missing required fields"""
        index = self.index
        authors = self._tally('Article', 'authorId', 'Articles referencing non-existent authors')
        missing = self._tally('Article', 'requiredFields',
                              'Articles missing required fields (title, content, authorId, or authorName)',
                              IssueType.MISSING_REQUIRED_FIELD)

        projection = {name: 1 for name in policy.ARTICLE_REQUIRED_FIELDS}
        for doc in self.store.find(policy.ARTICLES, projection):
            if index.is_dangling(policy.USERS, doc.get('authorId')):
                authors.record(doc['_id'], doc.get('authorId'))
            if any(not doc.get(name) for name in policy.ARTICLE_REQUIRED_FIELDS):
                missing.record(doc['_id'])

        return self._collect(authors, missing)

    def discover_report_issues(self) -> List[SanitizationIssue]:
        """Reports with dangling reporter, respondent, target or admin ids"""
        index = self.index
        reporters = self._tally('Report', 'reporter.id', 'Reports with non-existent reporter IDs')
        respondents = self._tally('Report', 'respondent.id', 'Reports with non-existent respondent IDs')
        targets = self._tally('Report', 'targetId', 'Reports referencing non-existent targets')
        actioned = self._tally('Report', 'actionedBy', 'Reports with non-existent actionedBy admin IDs')

        for doc in self.store.find(policy.REPORTS):
            doc_id = doc['_id']
            for tally, path in ((reporters, 'reporter.id'), (respondents, 'respondent.id'),
                                (actioned, 'actionedBy')):
                value = get_path(doc, path)
                if index.is_dangling(policy.USERS, value):
                    tally.record(doc_id, value)
            target_collection = self._report_target_collection(doc.get('targetType'))
            if target_collection and index.is_dangling(target_collection, doc.get('targetId')):
                targets.record(doc_id, doc.get('targetId'))

        return self._collect(reporters, respondents, targets, actioned)

    def _report_target_collection(self, target_type: Optional[str]) -> Optional[str]:
        """Collection a report target points at, by targetType"""
        return {'nugget': policy.ARTICLES, 'user': policy.USERS}.get(target_type)

    def discover_moderation_audit_log_issues(self) -> List[SanitizationIssue]:
        """Audit log entries whose report or performer is gone"""
        index = self.index
        reports = self._tally('ModerationAuditLog', 'reportId', 'Audit logs referencing non-existent reports')
        performers = self._tally('ModerationAuditLog', 'performedBy', 'Audit logs with non-existent performer IDs')

        for doc in self.store.find(policy.MODERATION_AUDIT_LOGS, {'reportId': 1, 'performedBy': 1}):
            if not index.contains(policy.REPORTS, doc.get('reportId')):
                reports.record(doc['_id'], doc.get('reportId'))
            if not index.contains(policy.USERS, doc.get('performedBy')):
                performers.record(doc['_id'], doc.get('performedBy'))

        return self._collect(reports, performers)

    def discover_feedback_issues(self) -> List[SanitizationIssue]:
        """Feedback tied to a user that no longer exists"""
        index = self.index
        users = self._tally('Feedback', 'user.id', 'Feedback entries with non-existent user IDs')

        for doc in self.store.find(policy.FEEDBACK, {'user': 1}):
            value = get_path(doc, 'user.id')
            if index.is_dangling(policy.USERS, value):
                users.record(doc['_id'], value)

        return self._collect(users)
