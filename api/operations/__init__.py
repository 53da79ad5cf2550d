# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Operations layer for reference sanitization.

This package handles the sanitization phases:
- Issue discovery (IssueDiscovery)
- Collection sanitizers (SANITIZER_ORDER)
- Report generation (ReportGenerator)
- Integrity verification (IntegrityChecker)
- Entry-count backfill (EntryCountBackfiller)

Principles:
- Single Responsibility Principle
- Dependency Injection (every operation takes a CollectionStore)
"""
