"""
Tests for the risk policy table
"""
import pytest

from domain_models import RiskTier
from operations import reference_policy as policy


class TestRiskTier:
    """risk_tier lookups"""

    @pytest.mark.parametrize("entity,field", [
        ('Collection', 'entries[].articleId'),
        ('Collection', 'entries[].addedByUserId'),
        ('Collection', 'followers[]'),
        ('Bookmark', 'userId'),
        ('Bookmark', 'nuggetId'),
        ('BookmarkFolder', 'userId'),
        ('BookmarkFolderLink', 'userId'),
        ('BookmarkFolderLink', 'bookmarkId'),
        ('BookmarkFolderLink', 'folderId'),
    ])
    def test_safe_auto_fix(self, entity, field):
        assert policy.risk_tier(entity, field) == RiskTier.SAFE_AUTO_FIX
        assert policy.is_auto_fixable(entity, field)

    @pytest.mark.parametrize("entity,field", [
        ('Collection', 'creatorId'),
        ('Article', 'authorId'),
        ('Feedback', 'user.id'),
    ])
    def test_conditional_cleanup(self, entity, field):
        assert policy.risk_tier(entity, field) == RiskTier.CONDITIONAL_CLEANUP
        assert not policy.is_auto_fixable(entity, field)

    @pytest.mark.parametrize("field", ['reporter.id', 'respondent.id', 'targetId', 'actionedBy', 'anything'])
    def test_reports_are_never_touched(self, field):
        """Every Report field resolves to DO_NOT_TOUCH, listed or not"""
        assert policy.risk_tier('Report', field) == RiskTier.DO_NOT_TOUCH

    def test_audit_log_never_touched(self):
        assert policy.risk_tier('ModerationAuditLog', 'reportId') == RiskTier.DO_NOT_TOUCH
        assert policy.risk_tier('ModerationAuditLog', 'performedBy') == RiskTier.DO_NOT_TOUCH

    def test_article_required_fields_not_touched(self):
        assert policy.risk_tier('Article', 'requiredFields') == RiskTier.DO_NOT_TOUCH

    def test_unknown_pair_defaults_to_do_not_touch(self):
        """Unlisted (entity, field) pairs are never auto-fixed"""
        assert policy.risk_tier('Bookmark', 'createdBy') == RiskTier.DO_NOT_TOUCH
        assert policy.risk_tier('Unknown', 'userId') == RiskTier.DO_NOT_TOUCH


class TestPolicyNotes:

    def test_audit_entities_share_note(self):
        assert policy.policy_note('Report', 'targetId') == policy.AUDIT_TRAIL_NOTE
        assert policy.policy_note('ModerationAuditLog', 'reportId') == policy.AUDIT_TRAIL_NOTE

    def test_conditional_note(self):
        assert 'manual review' in policy.policy_note('Collection', 'creatorId')

    def test_safe_fields_have_no_note(self):
        assert policy.policy_note('Bookmark', 'userId') == ''


def test_collection_names():
    """Entity names map to store collection names"""
    assert policy.collection_name('BookmarkFolderLink') == 'bookmarkfolderlinks'
    assert policy.collection_name('ModerationAuditLog') == 'moderationauditlogs'
    assert policy.collection_name('Feedback') == 'feedbacks'
