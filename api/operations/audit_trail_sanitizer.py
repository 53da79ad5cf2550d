# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Read-only sanitizers for preserved collections

Reports and moderation audit logs are audit trail; feedback is kept for
historical context. These sanitizers never write. They count the
collection and report how many dangling references were seen so the
run summary still accounts for them.
"""
from typing import Callable, List

from domain_models import CleanupResult, SanitizationIssue
from operations import reference_policy as policy
from operations.issue_discovery import IssueDiscovery
from operations.sanitizer_base import SanitizerBase
from operations.valid_id_index import ValidIdIndex


class ReadOnlySanitizer(SanitizerBase):
    """Counts records and dangling references, never mutates"""

    collection = ''
    operation = 'preserve'

    def _discover(self, discovery: IssueDiscovery) -> List[SanitizationIssue]:
        raise NotImplementedError

    def _sanitize(self, index: ValidIdIndex, result: CleanupResult, dry_run: bool) -> None:
        result.records_scanned = self.store.count(self.collection)
        result.records_skipped = result.records_scanned

        issues = self._discover(IssueDiscovery(self.store))
        result.details['orphaned_references'] = sum(issue.count for issue in issues)
        result.details['fields'] = sorted(issue.field for issue in issues if issue.field)
        result.details['note'] = policy.policy_note(self.entity, issues[0].field if issues else '')


class ReportSanitizer(ReadOnlySanitizer):
    entity = 'Report'
    collection = policy.REPORTS

    def _discover(self, discovery: IssueDiscovery) -> List[SanitizationIssue]:
        return discovery.discover_report_issues()


class ModerationAuditLogSanitizer(ReadOnlySanitizer):
    entity = 'ModerationAuditLog'
    collection = policy.MODERATION_AUDIT_LOGS

    def _discover(self, discovery: IssueDiscovery) -> List[SanitizationIssue]:
        return discovery.discover_moderation_audit_log_issues()


class FeedbackSanitizer(ReadOnlySanitizer):
    """Feedback with a missing user is CONDITIONAL_CLEANUP: flagged only"""

    entity = 'Feedback'
    collection = policy.FEEDBACK

    def _discover(self, discovery: IssueDiscovery) -> List[SanitizationIssue]:
        return discovery.discover_feedback_issues()
