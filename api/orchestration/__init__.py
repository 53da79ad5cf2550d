# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Orchestration modules for sanitization runs"""

from .sanitization_orchestrator import (
    OrchestratorState,
    SanitizationOrchestrator,
    SanitizationRunResult,
)

__all__ = ['OrchestratorState', 'SanitizationOrchestrator', 'SanitizationRunResult']
