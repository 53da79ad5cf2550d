# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Sanitization report generation

Builds a SanitizationReport from discovered issues and renders it as a
Markdown document for operators to review before running cleanup.
"""
import logging
import time
from collections import OrderedDict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from config import POST_CLEANUP_REPORT_PREFIX, REPORT_FILENAME
from domain_models import ReportSummary, RiskTier, SanitizationIssue, SanitizationReport

logger = logging.getLogger(__name__)

CATEGORY_HEADINGS = OrderedDict([
    (RiskTier.SAFE_AUTO_FIX, 'Safe Auto-Fix (will be cleaned)'),
    (RiskTier.CONDITIONAL_CLEANUP, 'Conditional Cleanup (manual review required)'),
    (RiskTier.DO_NOT_TOUCH, 'Do Not Touch (preserved)'),
])


class ReportGenerator:
    """Stateless report builder and Markdown writer

    Example:
        generator = ReportGenerator(report_dir=Path("."))
        report = generator.generate_report(issues, dry_run=True)
        path = generator.write_report_to_file(report)
    """

    def __init__(self, report_dir: Union[str, Path] = "."):
        self.report_dir = Path(report_dir)

    def generate_report(self, issues: List[SanitizationIssue], dry_run: bool) -> SanitizationReport:
        """Aggregate issues into a report with per-category and per-collection totals"""
        by_category: Dict[str, int] = {tier.value: 0 for tier in RiskTier}
        by_collection: Dict[str, int] = {}
        for issue in issues:
            by_category[issue.category.value] += issue.count
            by_collection[issue.collection] = by_collection.get(issue.collection, 0) + issue.count

        summary = ReportSummary(
            total_issues=len(issues),
            total_affected_records=sum(issue.count for issue in issues),
            by_category=by_category,
            by_collection=by_collection,
        )
        return SanitizationReport(
            timestamp=datetime.now(timezone.utc).isoformat(),
            dry_run=dry_run,
            issues=list(issues),
            summary=summary,
        )

    def default_report_path(self) -> Path:
        return self.report_dir / REPORT_FILENAME

    def post_cleanup_report_path(self) -> Path:
        """Timestamped path so post-cleanup reports never overwrite each other"""
        epoch_ms = int(time.time() * 1000)
        return self.report_dir / f"{POST_CLEANUP_REPORT_PREFIX}{epoch_ms}.md"

    def write_report_to_file(self, report: SanitizationReport, path: Optional[Union[str, Path]] = None) -> Path:
        """Render the report as Markdown and write it

        Args:
            report: Report to render
            path: Target file; defaults to <report_dir>/DATABASE_SANITIZATION_REPORT.md

        Returns:
            Path the report was written to
        """
        target = Path(path) if path is not None else self.default_report_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.render_markdown(report), encoding='utf-8')
        logger.info("Report written to %s", target)
        return target

    def render_markdown(self, report: SanitizationReport) -> str:
        lines = [
            '# Database Sanitization Report',
            '',
            f"**Generated:** {report.timestamp}",
            f"**Mode:** {'DRY RUN (no changes made)' if report.dry_run else 'EXECUTE'}",
            '',
            '## Summary',
            '',
            f"- **Total issue types:** {report.summary.total_issues}",
            f"- **Total affected records:** {report.summary.total_affected_records}",
            '',
            '### By Category',
            '',
            '| Category | Affected Records |',
            '|----------|------------------|',
        ]
        for category, count in report.summary.by_category.items():
            lines.append(f"| {category} | {count} |")

        lines += ['', '### By Collection', '']
        if report.summary.by_collection:
            lines += ['| Collection | Affected Records |', '|------------|------------------|']
            for collection, count in sorted(report.summary.by_collection.items()):
                lines.append(f"| {collection} | {count} |")
        else:
            lines.append('No issues found.')

        for tier, heading in CATEGORY_HEADINGS.items():
            issues = report.issues_in(tier)
            if not issues:
                continue
            lines += ['', f"## {heading}", '']
            for issue in issues:
                lines += self._render_issue(issue)

        lines.append('')
        return '\n'.join(lines)

    def _render_issue(self, issue: SanitizationIssue) -> List[str]:
        lines = [
            f"### {issue.collection}: {issue.description}",
            '',
            f"- **Type:** {issue.issue_type.value}",
            f"- **Count:** {issue.count}",
        ]
        if issue.field:
            lines.append(f"- **Field:** `{issue.field}`")
        if issue.sample_ids:
            samples = ', '.join(f"`{sample}`" for sample in issue.sample_ids)
            lines.append(f"- **Sample IDs:** {samples}")
        for key, value in issue.details.items():
            if isinstance(value, list):
                value = ', '.join(f"`{item}`" for item in value)
            lines.append(f"- **{key}:** {value}")
        lines.append('')
        return lines
