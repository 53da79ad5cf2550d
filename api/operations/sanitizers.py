# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Sanitizer registry and execution order

Parents are cleaned before the links that point at them, so the link
sanitizer sees the state left behind by the bookmark and folder passes.
"""
from typing import Dict, List, Type

from domain_models import CleanupResult
from operations import reference_policy as policy
from operations.audit_trail_sanitizer import (
    FeedbackSanitizer,
    ModerationAuditLogSanitizer,
    ReportSanitizer,
)
from operations.bookmark_folder_link_sanitizer import BookmarkFolderLinkSanitizer
from operations.bookmark_folder_sanitizer import BookmarkFolderSanitizer
from operations.bookmark_sanitizer import BookmarkSanitizer
from operations.collection_sanitizer import CollectionSanitizer
from operations.sanitizer_base import SanitizerBase
from store.interfaces import CollectionStore

SANITIZER_ORDER: List[Type[SanitizerBase]] = [
    CollectionSanitizer,
    BookmarkSanitizer,
    BookmarkFolderSanitizer,
    BookmarkFolderLinkSanitizer,
    ReportSanitizer,
    ModerationAuditLogSanitizer,
    FeedbackSanitizer,
]

# Lookup by entity name ('Bookmark') or store collection name ('bookmarks')
SANITIZERS: Dict[str, Type[SanitizerBase]] = {}
for _sanitizer in SANITIZER_ORDER:
    SANITIZERS[_sanitizer.entity.lower()] = _sanitizer
    SANITIZERS[policy.collection_name(_sanitizer.entity)] = _sanitizer


def get_sanitizer(name: str) -> Type[SanitizerBase]:
    """Resolve a sanitizer class by entity or collection name

    Raises:
        KeyError: If no sanitizer handles that collection
    """
    return SANITIZERS[name.lower()]


def sanitize_collections(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return CollectionSanitizer(store).sanitize(dry_run)


def sanitize_bookmarks(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return BookmarkSanitizer(store).sanitize(dry_run)


def sanitize_bookmark_folders(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return BookmarkFolderSanitizer(store).sanitize(dry_run)


def sanitize_bookmark_folder_links(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return BookmarkFolderLinkSanitizer(store).sanitize(dry_run)


def sanitize_reports(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return ReportSanitizer(store).sanitize(dry_run)


def sanitize_moderation_audit_logs(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return ModerationAuditLogSanitizer(store).sanitize(dry_run)


def sanitize_feedback(store: CollectionStore, dry_run: bool = True) -> CleanupResult:
    return FeedbackSanitizer(store).sanitize(dry_run)


def run_all_sanitizers(store: CollectionStore, dry_run: bool = True) -> List[CleanupResult]:
    """Run every sanitizer in SANITIZER_ORDER; errors are collected, never raised"""
    results = []
    for sanitizer_class in SANITIZER_ORDER:
        results.append(sanitizer_class(store).sanitize(dry_run))
    return results
