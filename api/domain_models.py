# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Domain models for the sanitization pipeline"""
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any, Dict, List, Optional


class IssueType(str, Enum):
    """Kind of integrity violation found during discovery"""
    ORPHANED_REFERENCE = 'orphaned_reference'
    ORPHANED_LINK = 'orphaned_link'
    STALE_DOCUMENT = 'stale_document'
    INVALID_FIELD = 'invalid_field'
    MISSING_REQUIRED_FIELD = 'missing_required_field'


class RiskTier(str, Enum):
    """Cleanup category deciding whether an issue may be auto-fixed"""
    SAFE_AUTO_FIX = 'SAFE_AUTO_FIX'
    CONDITIONAL_CLEANUP = 'CONDITIONAL_CLEANUP'
    DO_NOT_TOUCH = 'DO_NOT_TOUCH'


@dataclass
class SanitizationIssue:
    """One (collection, field) pair with at least one violation.

    `sample_ids` is capped and only meant for diagnostics; `count` is
    the exhaustive number of violations.
    """
    collection: str
    issue_type: IssueType
    description: str
    count: int
    sample_ids: List[str]
    category: RiskTier
    field: Optional[str] = None
    details: Dict[str, Any] = dc_field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the JSON shape used in reports and API responses"""
        data = {
            'collection': self.collection,
            'issueType': self.issue_type.value,
            'description': self.description,
            'count': self.count,
            'sampleIds': list(self.sample_ids),
            'category': self.category.value,
        }
        if self.field:
            data['field'] = self.field
        if self.details:
            data['details'] = dict(self.details)
        return data


@dataclass
class CleanupResult:
    """Outcome of one sanitizer call.

    In dry-run mode `records_skipped` holds what would have been cleaned.
    """
    collection: str
    operation: str
    records_scanned: int = 0
    records_cleaned: int = 0
    records_skipped: int = 0
    errors: List[str] = dc_field(default_factory=list)
    details: Dict[str, Any] = dc_field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            'collection': self.collection,
            'operation': self.operation,
            'recordsScanned': self.records_scanned,
            'recordsCleaned': self.records_cleaned,
            'recordsSkipped': self.records_skipped,
            'errors': list(self.errors),
            'details': dict(self.details),
        }


@dataclass
class SanitizationStats:
    """Totals across every sanitizer of an execute run"""
    total_scanned: int = 0
    total_cleaned: int = 0
    total_skipped: int = 0
    total_errors: int = 0
    by_collection: Dict[str, CleanupResult] = dc_field(default_factory=dict)

    def add(self, result: CleanupResult) -> None:
        """Fold one sanitizer result into the totals"""
        self.total_scanned += result.records_scanned
        self.total_cleaned += result.records_cleaned
        self.total_skipped += result.records_skipped
        self.total_errors += len(result.errors)
        self.by_collection[result.collection] = result

    def to_dict(self) -> dict:
        return {
            'totalScanned': self.total_scanned,
            'totalCleaned': self.total_cleaned,
            'totalSkipped': self.total_skipped,
            'totalErrors': self.total_errors,
            'byCollection': {
                name: result.to_dict() for name, result in self.by_collection.items()
            },
        }


@dataclass
class ReportSummary:
    """Aggregate counts over a list of issues"""
    total_issues: int
    total_affected_records: int
    by_category: Dict[str, int]
    by_collection: Dict[str, int]

    def to_dict(self) -> dict:
        return {
            'totalIssues': self.total_issues,
            'totalAffectedRecords': self.total_affected_records,
            'byCategory': dict(self.by_category),
            'byCollection': dict(self.by_collection),
        }


@dataclass
class SanitizationReport:
    """Persistable snapshot of a discovery pass"""
    timestamp: str
    dry_run: bool
    issues: List[SanitizationIssue]
    summary: ReportSummary

    def issues_in(self, category: RiskTier) -> List[SanitizationIssue]:
        return [issue for issue in self.issues if issue.category == category]

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp,
            'dryRun': self.dry_run,
            'issues': [issue.to_dict() for issue in self.issues],
            'summary': self.summary.to_dict(),
        }
