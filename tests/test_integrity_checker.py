# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Tests for IntegrityChecker verification

Tests for:
- Hard checks (followers, entries, bookmarks, links)
- Soft checks (creators, authors)
- passed / hard_passed semantics
"""
import pytest
from unittest.mock import patch


def checks_by_name(result):
    return {check.name: check for check in result.checks}


class TestIntegrityChecker:
    """IntegrityChecker operation class unit tests"""

    def test_clean_database_passes(self, store, seed):
        from operations.integrity_checker import IntegrityChecker

        user = seed.user()
        article = seed.article(user)
        seed.collection(user, entries=[{'articleId': article, 'addedByUserId': user}], followers=[user])
        bookmark = seed.bookmark(user, article)
        seed.link(user, bookmark, seed.folder(user))

        result = IntegrityChecker(store).verify_database_integrity()

        assert result.passed is True
        assert result.hard_passed is True
        assert result.errors == []
        assert len(result.checks) == 6

    def test_dirty_database_fails_hard_checks(self, store, dirty_db):
        from operations.integrity_checker import IntegrityChecker

        result = IntegrityChecker(store).verify_database_integrity()
        checks = checks_by_name(result)

        assert result.hard_passed is False
        assert checks['Collection Followers'].details['invalidFollowers'] == 1
        assert checks['Collection Entry References'].details == {'invalidArticleRefs': 1, 'invalidUserRefs': 1}
        assert checks['Bookmark References'].details['invalidBookmarks'] == 2
        assert checks['Bookmark Folder Link References'].details['invalidLinks'] == 1

    def test_hard_checks_pass_after_cleanup(self, store, dirty_db):
        """Soft failures remain but every hard check holds"""
        from operations.integrity_checker import IntegrityChecker
        from operations.sanitizers import run_all_sanitizers

        run_all_sanitizers(store, dry_run=False)
        result = IntegrityChecker(store).verify_database_integrity()
        checks = checks_by_name(result)

        assert result.hard_passed is True
        assert result.passed is False
        assert checks['Collection Creator IDs'].passed is False
        assert checks['Collection Creator IDs'].severity == 'soft'
        assert checks['Article Author References'].passed is False
        assert len(result.errors) == 2

    def test_missing_soft_references_are_ignored(self, store, seed):
        """Absent creator/author is not a failure, only a dangling one"""
        from operations.integrity_checker import IntegrityChecker

        seed.collection(None)
        seed.article(None)

        result = IntegrityChecker(store).verify_database_integrity()
        assert result.passed is True

    def test_store_error_fails_verification(self, store, dirty_db):
        from pymongo.errors import ServerSelectionTimeoutError
        from operations.integrity_checker import IntegrityChecker

        with patch.object(store, 'ids', side_effect=ServerSelectionTimeoutError("down")):
            result = IntegrityChecker(store).verify_database_integrity()

        assert result.passed is False
        assert result.hard_passed is False
        assert result.checks == []
        assert "down" in result.errors[0]

    def test_to_dict(self, store):
        from operations.integrity_checker import IntegrityChecker

        data = IntegrityChecker(store).verify_database_integrity().to_dict()

        assert data['passed'] is True
        assert data['hardPassed'] is True
        assert {c['severity'] for c in data['checks']} == {'hard', 'soft'}


def test_print_verification_results(store, dirty_db, console):
    from operations.integrity_checker import IntegrityChecker, print_verification_results

    print_verification_results(IntegrityChecker(store).verify_database_integrity(), console)
    output = console.output.getvalue()

    assert 'VERIFICATION RESULTS' in output
    assert '[FAIL] Bookmark References (hard)' in output
    assert 'Hard checks: FAILED' in output
