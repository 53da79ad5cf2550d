#!/usr/bin/env python3
# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT
"""
Sanitize the document store.

Runs discovery, writes DATABASE_SANITIZATION_REPORT.md and, when
confirmed, removes SAFE_AUTO_FIX orphans then verifies the result.

Usage:
    # Dry run (default): report only
    python scripts/sanitize_database.py

    # Execute cleanup
    DRY_RUN=false FORCE_EXECUTE=true python scripts/sanitize_database.py
    python scripts/sanitize_database.py --execute --force

    # Or via docker:
    docker exec refguard python /app/scripts/sanitize_database.py --execute --force
"""

import argparse
import sys
from pathlib import Path

# Add api directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "api"))


def main():
    parser = argparse.ArgumentParser(description="Sanitize orphaned references in the document store")
    parser.add_argument("--execute", action="store_true", help="Disable dry run (same as DRY_RUN=false)")
    parser.add_argument("--force", action="store_true", help="Confirm cleanup (same as FORCE_EXECUTE=true)")
    parser.add_argument("--report-dir", help="Directory for report files")
    args = parser.parse_args()

    from config import default_config
    from logging_config import configure_logging
    from manage import build_config, build_logger
    from orchestration import SanitizationOrchestrator

    configure_logging(default_config.logging.level)
    config = build_config(args)
    result = SanitizationOrchestrator(config, build_logger(config)).run()
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
