# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Operations factory for store-backed maintenance operations.

Gives the CLI, the orchestrator and the API routes one place to build
discovery, sanitizers, verification and reporting against a store.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from config import default_config
from operations.entry_count_backfiller import EntryCountBackfiller
from operations.integrity_checker import IntegrityChecker
from operations.issue_discovery import IssueDiscovery
from operations.report_generator import ReportGenerator
from operations.sanitizer_base import SanitizerBase
from operations.sanitizers import get_sanitizer
from store.interfaces import CollectionStore

logger = logging.getLogger(__name__)


class OperationsFactory:
    """Factory for creating maintenance operations bound to a store.

    Usage:
        discovery = OperationsFactory.create_discovery(store)
        issues = discovery.discover_all_issues()

        sanitizer = OperationsFactory.create_sanitizer(store, 'bookmarks')
        result = sanitizer.sanitize(dry_run=True)
    """

    @staticmethod
    def create_discovery(store: CollectionStore, sample_size: Optional[int] = None) -> IssueDiscovery:
        """Create an IssueDiscovery (sample size defaults to config)"""
        if sample_size is None:
            sample_size = default_config.sanitization.sample_size
        return IssueDiscovery(store, sample_size=sample_size)

    @staticmethod
    def create_sanitizer(store: CollectionStore, name: str) -> SanitizerBase:
        """Create the sanitizer for a collection or entity name

        Raises:
            KeyError: If the name has no sanitizer
        """
        return get_sanitizer(name)(store)

    @staticmethod
    def create_integrity_checker(store: CollectionStore) -> IntegrityChecker:
        return IntegrityChecker(store)

    @staticmethod
    def create_report_generator(report_dir: Optional[Union[str, Path]] = None) -> ReportGenerator:
        """Create a ReportGenerator (directory defaults to config)"""
        if report_dir is None:
            report_dir = default_config.sanitization.report_dir
        return ReportGenerator(report_dir)

    @staticmethod
    def create_backfiller(store: CollectionStore) -> EntryCountBackfiller:
        return EntryCountBackfiller(store)
