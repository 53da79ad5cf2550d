# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Sanitization orchestrator - drives a full sanitization run.

Phases:
1. Connect to the store
2. Discover issues
3. Write the report (dry run stops here)
4. Execute sanitizers in SANITIZER_ORDER (requires force)
5. Verify integrity and re-run discovery

Exit codes: 0 when a dry run or an execute run completes, 1 when
confirmation is required or the run fails.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from config import Config, default_config
from domain_models import RiskTier, SanitizationReport, SanitizationStats
from operations.integrity_checker import IntegrityChecker, VerificationResult, print_verification_results
from operations.issue_discovery import IssueDiscovery
from operations.report_generator import ReportGenerator
from operations.sanitizers import SANITIZER_ORDER
from services.logger import Logger
from startup.config_validator import ConfigValidator
from store.connection import connect_store
from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class OrchestratorState(str, Enum):
    """Run state, recorded in order in SanitizationOrchestrator.history"""
    IDLE = 'IDLE'
    CONNECTING = 'CONNECTING'
    DISCOVERING = 'DISCOVERING'
    REPORTING = 'REPORTING'
    DRY_RUN_EXIT = 'DRY_RUN_EXIT'
    AWAITING_CONFIRMATION = 'AWAITING_CONFIRMATION'
    EXECUTING = 'EXECUTING'
    VERIFYING = 'VERIFYING'
    DONE = 'DONE'
    FAILED = 'FAILED'


@dataclass
class SanitizationRunResult:
    """Everything a run produced, for callers and tests"""
    exit_code: int
    state: OrchestratorState
    report: Optional[SanitizationReport] = None
    report_path: Optional[Path] = None
    stats: Optional[SanitizationStats] = None
    verification: Optional[VerificationResult] = None
    post_report: Optional[SanitizationReport] = None
    post_report_path: Optional[Path] = None
    errors: List[str] = field(default_factory=list)


class SanitizationOrchestrator:
    """Runs discovery, reporting, cleanup and verification in order.

    Example:
        orchestrator = SanitizationOrchestrator(default_config, Logger())
        result = orchestrator.run()
        sys.exit(result.exit_code)
    """

    def __init__(self, config: Config = None, log: Logger = None,
                 store_factory: Optional[Callable[..., CollectionStore]] = None):
        self.config = config or default_config
        self.log = log or Logger()
        self.store_factory = store_factory or connect_store
        self.state = OrchestratorState.IDLE
        self.history: List[OrchestratorState] = []
        self.reports = ReportGenerator(self.config.sanitization.report_dir)

    def _enter(self, state: OrchestratorState):
        self.state = state
        self.history.append(state)
        logger.debug("Orchestrator state: %s", state.value)

    @property
    def dry_run(self) -> bool:
        return self.config.sanitization.dry_run

    def run(self) -> SanitizationRunResult:
        """Execute a full run; never raises"""
        store = None
        try:
            self._print_banner()

            self._enter(OrchestratorState.CONNECTING)
            self.log.info("[1/5] Connecting to database...")
            ConfigValidator(self.config).validate()
            store = self.store_factory(self.config.database)
            self.log.info("Connected")

            return self._run_phases(store)
        except Exception as e:
            logger.exception("Sanitization run failed")
            self._enter(OrchestratorState.FAILED)
            self.log.error(f"Sanitization failed: {e}")
            return SanitizationRunResult(exit_code=EXIT_FAILURE, state=self.state, errors=[str(e)])
        finally:
            if store is not None:
                store.close()

    def _run_phases(self, store: CollectionStore) -> SanitizationRunResult:
        self._enter(OrchestratorState.DISCOVERING)
        self.log.info("[2/5] Running discovery...")
        issues = IssueDiscovery(store, sample_size=self.config.sanitization.sample_size).discover_all_issues()

        self._enter(OrchestratorState.REPORTING)
        self.log.info("[3/5] Generating report...")
        report = self.reports.generate_report(issues, self.dry_run)
        report_path = self.reports.write_report_to_file(report, self.config.sanitization.report_path)
        self.log.info(f"Report written to: {report_path}")
        self._print_discovery_summary(report)

        result = SanitizationRunResult(
            exit_code=EXIT_OK, state=self.state, report=report, report_path=report_path
        )

        if self.dry_run:
            self._enter(OrchestratorState.DRY_RUN_EXIT)
            self.log.info()
            self.log.info("DRY RUN complete. No changes were made.")
            self.log.info("Review the report, then re-run with DRY_RUN=false FORCE_EXECUTE=true to apply fixes.")
            result.state = self.state
            return result

        if not self.config.sanitization.force_execute:
            self._enter(OrchestratorState.AWAITING_CONFIRMATION)
            self._print_confirmation_required(report)
            result.exit_code = EXIT_FAILURE
            result.state = self.state
            return result

        self._enter(OrchestratorState.EXECUTING)
        self.log.info("[4/5] Executing cleanup...")
        result.stats = self._execute(store)

        self._enter(OrchestratorState.VERIFYING)
        self.log.info("[5/5] Verifying database integrity...")
        result.verification = IntegrityChecker(store).verify_database_integrity()
        print_verification_results(result.verification, self.log)
        self._post_cleanup_discovery(store, result)

        self._enter(OrchestratorState.DONE)
        result.state = self.state
        self.log.banner('SANITIZATION COMPLETE')
        return result

    def _execute(self, store: CollectionStore) -> SanitizationStats:
        """Run every sanitizer; errors are reported, never abort the run"""
        stats = SanitizationStats()
        for sanitizer_class in SANITIZER_ORDER:
            cleanup = sanitizer_class(store).sanitize(dry_run=False)
            stats.add(cleanup)
            for error in cleanup.errors:
                self.log.warning(f"{cleanup.collection}: {error}")
        self._print_cleanup_summary(stats)
        return stats

    def _post_cleanup_discovery(self, store: CollectionStore, result: SanitizationRunResult):
        """Second discovery pass; the report is only written if issues remain"""
        self.log.banner('POST-CLEANUP DISCOVERY')
        issues = IssueDiscovery(store, sample_size=self.config.sanitization.sample_size).discover_all_issues()
        result.post_report = self.reports.generate_report(issues, dry_run=False)
        if not issues:
            self.log.info("No remaining issues found.")
            return
        result.post_report_path = self.reports.write_report_to_file(
            result.post_report, self.reports.post_cleanup_report_path()
        )
        self.log.info(
            f"{result.post_report.summary.total_issues} issue types remain "
            f"({result.post_report.summary.total_affected_records} records)"
        )
        self.log.info(f"Post-cleanup report written to: {result.post_report_path}")

    def _print_banner(self):
        self.log.banner('DATABASE SANITIZATION')
        self.log.info(f"Mode: {'DRY RUN (no changes will be made)' if self.dry_run else 'EXECUTE'}")
        self.log.info(f"Database: {self.config.database.database}")
        self.log.rule()

    def _print_discovery_summary(self, report: SanitizationReport):
        summary = report.summary
        self.log.banner('DISCOVERY SUMMARY')
        self.log.info(f"Total issue types: {summary.total_issues}")
        self.log.info(f"Total affected records: {summary.total_affected_records}")
        self.log.info()
        self.log.info("By category:")
        for category, count in summary.by_category.items():
            self.log.info(f"  {category}: {count}")
        if summary.by_collection:
            self.log.info()
            self.log.info("By collection:")
            for collection, count in sorted(summary.by_collection.items()):
                self.log.info(f"  {collection}: {count}")

    def _print_confirmation_required(self, report: SanitizationReport):
        self.log.info()
        self.log.warning("DRY_RUN=false but FORCE_EXECUTE is not set.")
        fixable = report.issues_in(RiskTier.SAFE_AUTO_FIX)
        self.log.info(f"{sum(issue.count for issue in fixable)} records would be cleaned:")
        for issue in fixable:
            self.log.info(f"  - {issue.collection}: {issue.description} ({issue.count})")
        self.log.info("To execute cleanup, re-run with FORCE_EXECUTE=true (or --force).")

    def _print_cleanup_summary(self, stats: SanitizationStats):
        self.log.banner('CLEANUP SUMMARY')
        for name, cleanup in stats.by_collection.items():
            self.log.info(
                f"  {name}: scanned={cleanup.records_scanned} cleaned={cleanup.records_cleaned} "
                f"skipped={cleanup.records_skipped} errors={len(cleanup.errors)}"
            )
        self.log.rule('-')
        self.log.info(
            f"Total: scanned={stats.total_scanned} cleaned={stats.total_cleaned} "
            f"skipped={stats.total_skipped} errors={stats.total_errors}"
        )
