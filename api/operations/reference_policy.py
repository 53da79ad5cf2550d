# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Reference map and risk policy for managed collections.

One table decides whether a violation may be repaired automatically.
Discovery reads it to classify issues; sanitizers read it before acting,
so the two can never disagree about what is safe to touch.
"""
from typing import Dict, Tuple

from domain_models import RiskTier

# Entity name -> store collection name
USERS = 'users'
ARTICLES = 'articles'
COLLECTIONS = 'collections'
BOOKMARKS = 'bookmarks'
BOOKMARK_FOLDERS = 'bookmarkfolders'
BOOKMARK_FOLDER_LINKS = 'bookmarkfolderlinks'
REPORTS = 'reports'
MODERATION_AUDIT_LOGS = 'moderationauditlogs'
FEEDBACK = 'feedbacks'

COLLECTION_NAMES: Dict[str, str] = {
    'User': USERS,
    'Article': ARTICLES,
    'Collection': COLLECTIONS,
    'Bookmark': BOOKMARKS,
    'BookmarkFolder': BOOKMARK_FOLDERS,
    'BookmarkFolderLink': BOOKMARK_FOLDER_LINKS,
    'Report': REPORTS,
    'ModerationAuditLog': MODERATION_AUDIT_LOGS,
    'Feedback': FEEDBACK,
}

AUDIT_TRAIL_ENTITIES = frozenset({'Report', 'ModerationAuditLog'})

ARTICLE_REQUIRED_FIELDS = ('title', 'content', 'authorId', 'authorName')

# (entity, field) -> risk tier
RISK_POLICY: Dict[Tuple[str, str], RiskTier] = {
    ('Collection', 'entries[].articleId'): RiskTier.SAFE_AUTO_FIX,
    ('Collection', 'entries[].addedByUserId'): RiskTier.SAFE_AUTO_FIX,
    ('Collection', 'followers[]'): RiskTier.SAFE_AUTO_FIX,
    ('Collection', 'creatorId'): RiskTier.CONDITIONAL_CLEANUP,
    ('Bookmark', 'userId'): RiskTier.SAFE_AUTO_FIX,
    ('Bookmark', 'nuggetId'): RiskTier.SAFE_AUTO_FIX,
    ('BookmarkFolder', 'userId'): RiskTier.SAFE_AUTO_FIX,
    ('BookmarkFolderLink', 'userId'): RiskTier.SAFE_AUTO_FIX,
    ('BookmarkFolderLink', 'bookmarkId'): RiskTier.SAFE_AUTO_FIX,
    ('BookmarkFolderLink', 'folderId'): RiskTier.SAFE_AUTO_FIX,
    ('Article', 'authorId'): RiskTier.CONDITIONAL_CLEANUP,
    ('Article', 'requiredFields'): RiskTier.DO_NOT_TOUCH,
    ('Feedback', 'user.id'): RiskTier.CONDITIONAL_CLEANUP,
    ('Report', 'reporter.id'): RiskTier.DO_NOT_TOUCH,
    ('Report', 'respondent.id'): RiskTier.DO_NOT_TOUCH,
    ('Report', 'targetId'): RiskTier.DO_NOT_TOUCH,
    ('Report', 'actionedBy'): RiskTier.DO_NOT_TOUCH,
    ('ModerationAuditLog', 'reportId'): RiskTier.DO_NOT_TOUCH,
    ('ModerationAuditLog', 'performedBy'): RiskTier.DO_NOT_TOUCH,
}

# Why a non-automatic tier was chosen, surfaced in report details
POLICY_NOTES: Dict[Tuple[str, str], str] = {
    ('Collection', 'creatorId'): 'Requires manual review - may need to reassign or delete collection',
    ('Article', 'authorId'): 'Requires manual review - may need to reassign author or delete article',
    ('Article', 'requiredFields'): 'Requires manual review - may be critical data',
    ('Feedback', 'user.id'): 'May need to preserve for historical context',
}
AUDIT_TRAIL_NOTE = 'Audit trail data - preserved, never modified automatically'


def risk_tier(entity: str, field: str) -> RiskTier:
    """Look up the tier for (entity, field).

    Audit-trail entities are always DO_NOT_TOUCH; unknown pairs fall back
    to DO_NOT_TOUCH so nothing unlisted is ever repaired.
    """
    if entity in AUDIT_TRAIL_ENTITIES:
        return RiskTier.DO_NOT_TOUCH
    return RISK_POLICY.get((entity, field), RiskTier.DO_NOT_TOUCH)


def is_auto_fixable(entity: str, field: str) -> bool:
    """True if a sanitizer may repair violations of (entity, field)"""
    return risk_tier(entity, field) == RiskTier.SAFE_AUTO_FIX


def policy_note(entity: str, field: str) -> str:
    """Explanation attached to issues that are not auto-fixed"""
    if entity in AUDIT_TRAIL_ENTITIES:
        return AUDIT_TRAIL_NOTE
    return POLICY_NOTES.get((entity, field), '')


def collection_name(entity: str) -> str:
    """Store collection name for an entity"""
    return COLLECTION_NAMES[entity]
