# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Post-cleanup integrity verification

Verifies reference consistency after sanitization:
1. Collection followers point at existing users (hard)
2. Collection entries point at existing articles and users (hard)
3. Bookmarks point at existing users and articles (hard)
4. Bookmark folder links point at existing users, bookmarks and folders (hard)
5. Collection creators exist (soft - never auto-fixed)
6. Article authors exist (soft - never auto-fixed)

Hard checks must pass after a successful cleanup. Soft checks cover
references that are deliberately left for manual review.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from operations import reference_policy as policy
from operations.valid_id_index import ValidIdIndex
from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)

HARD = 'hard'
SOFT = 'soft'


@dataclass
class IntegrityCheck:
    """Result of a single integrity check"""
    name: str
    passed: bool
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    severity: str = HARD

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'passed': self.passed,
            'message': self.message,
            'details': dict(self.details),
            'severity': self.severity,
        }


@dataclass
class VerificationResult:
    """Complete verification result

    `passed` covers every check; `hard_passed` only the hard ones.
    """
    passed: bool
    hard_passed: bool
    checks: List[IntegrityCheck] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'passed': self.passed,
            'hardPassed': self.hard_passed,
            'checks': [check.to_dict() for check in self.checks],
            'errors': list(self.errors),
        }


class IntegrityChecker:
    """Reference integrity checker with injectable store

    Example:
        checker = IntegrityChecker(store)
        result = checker.verify_database_integrity()
        if not result.hard_passed:
            print(f"Errors: {result.errors}")
    """

    def __init__(self, store: CollectionStore):
        self.store = store

    def verify_database_integrity(self) -> VerificationResult:
        """Run all checks against freshly loaded ID sets"""
        logger.info("[Verification] Starting database integrity verification...")
        index = ValidIdIndex(self.store)
        try:
            checks = [
                self._check_collection_followers(index),
                self._check_collection_entries(index),
                self._check_bookmarks(index),
                self._check_bookmark_folder_links(index),
                self._check_collection_creators(index),
                self._check_article_authors(index),
            ]
        except Exception as e:
            logger.exception("[Verification] Verification failed")
            return VerificationResult(passed=False, hard_passed=False, errors=[f"Verification failed: {e}"])

        errors = [f"{check.name}: {check.message}" for check in checks if not check.passed]
        result = VerificationResult(
            passed=all(check.passed for check in checks),
            hard_passed=all(check.passed for check in checks if check.severity == HARD),
            checks=checks,
            errors=errors,
        )
        logger.info(
            "[Verification] Complete: passed=%s hard_passed=%s", result.passed, result.hard_passed
        )
        return result

    def _check_collection_followers(self, index: ValidIdIndex) -> IntegrityCheck:
        """Every follower in every collection is an existing user"""
        invalid = 0
        for doc in self.store.find(policy.COLLECTIONS, {'followers': 1}):
            invalid += sum(1 for f in doc.get('followers') or [] if not index.contains(policy.USERS, f))

        return IntegrityCheck(
            name='Collection Followers',
            passed=invalid == 0,
            message=(
                f"{invalid} invalid follower references found"
                if invalid else "All collection followers are valid"
            ),
            details={'invalidFollowers': invalid},
        )

    def _check_collection_entries(self, index: ValidIdIndex) -> IntegrityCheck:
        """Every entry references an existing article and adding user"""
        invalid_articles = 0
        invalid_users = 0
        for doc in self.store.find(policy.COLLECTIONS, {'entries': 1}):
            for entry in doc.get('entries') or []:
                if not index.contains(policy.ARTICLES, entry.get('articleId')):
                    invalid_articles += 1
                if not index.contains(policy.USERS, entry.get('addedByUserId')):
                    invalid_users += 1

        problems = []
        if invalid_articles:
            problems.append(f"{invalid_articles} entries reference missing articles")
        if invalid_users:
            problems.append(f"{invalid_users} entries reference missing users")

        return IntegrityCheck(
            name='Collection Entry References',
            passed=not problems,
            message="; ".join(problems) if problems else "All collection entries are valid",
            details={'invalidArticleRefs': invalid_articles, 'invalidUserRefs': invalid_users},
        )

    def _check_bookmarks(self, index: ValidIdIndex) -> IntegrityCheck:
        """Every bookmark points at an existing user and article"""
        invalid = 0
        for doc in self.store.find(policy.BOOKMARKS, {'userId': 1, 'nuggetId': 1}):
            if (not index.contains(policy.USERS, doc.get('userId'))
                    or not index.contains(policy.ARTICLES, doc.get('nuggetId'))):
                invalid += 1

        return IntegrityCheck(
            name='Bookmark References',
            passed=invalid == 0,
            message=f"{invalid} orphaned bookmarks found" if invalid else "All bookmarks are valid",
            details={'invalidBookmarks': invalid},
        )

    def _check_bookmark_folder_links(self, index: ValidIdIndex) -> IntegrityCheck:
        """Every link points at an existing user, bookmark and folder"""
        invalid = 0
        projection = {'userId': 1, 'bookmarkId': 1, 'folderId': 1}
        for doc in self.store.find(policy.BOOKMARK_FOLDER_LINKS, projection):
            if (not index.contains(policy.USERS, doc.get('userId'))
                    or not index.contains(policy.BOOKMARKS, doc.get('bookmarkId'))
                    or not index.contains(policy.BOOKMARK_FOLDERS, doc.get('folderId'))):
                invalid += 1

        return IntegrityCheck(
            name='Bookmark Folder Link References',
            passed=invalid == 0,
            message=f"{invalid} orphaned folder links found" if invalid else "All folder links are valid",
            details={'invalidLinks': invalid},
        )

    def _check_collection_creators(self, index: ValidIdIndex) -> IntegrityCheck:
        invalid = sum(
            1 for doc in self.store.find(policy.COLLECTIONS, {'creatorId': 1})
            if index.is_dangling(policy.USERS, doc.get('creatorId'))
        )
        return IntegrityCheck(
            name='Collection Creator IDs',
            passed=invalid == 0,
            message=(
                f"{invalid} collections with non-existent creators (manual review required)"
                if invalid else "All collection creators exist"
            ),
            details={'invalidCreators': invalid},
            severity=SOFT,
        )

    def _check_article_authors(self, index: ValidIdIndex) -> IntegrityCheck:
        invalid = sum(
            1 for doc in self.store.find(policy.ARTICLES, {'authorId': 1})
            if index.is_dangling(policy.USERS, doc.get('authorId'))
        )
        return IntegrityCheck(
            name='Article Author References',
            passed=invalid == 0,
            message=(
                f"{invalid} articles with non-existent authors (manual review required)"
                if invalid else "All article authors exist"
            ),
            details={'invalidAuthors': invalid},
            severity=SOFT,
        )


def print_verification_results(result: VerificationResult, log) -> None:
    """Render verification results through a console Logger"""
    log.banner('VERIFICATION RESULTS')
    for check in result.checks:
        status = 'PASS' if check.passed else 'FAIL'
        log.info(f"[{status}] {check.name} ({check.severity}): {check.message}")
    for error in result.errors:
        log.error(error)
    log.rule('-')
    log.info(f"Overall: {'PASSED' if result.passed else 'FAILED'}")
    log.info(f"Hard checks: {'PASSED' if result.hard_passed else 'FAILED'}")
