#!/usr/bin/env python3
# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT
"""
Refguard Sanitization CLI

Usage:
    python manage.py sanitize                   # Full run (dry run unless DRY_RUN=false)
    python manage.py sanitize --execute --force # Apply SAFE_AUTO_FIX cleanup
    python manage.py discover                   # Print discovered issues
    python manage.py verify                     # Run integrity checks
    python manage.py sanitize-collection NAME   # Sanitize one collection (dry run)
    python manage.py backfill-counts            # Backfill missing validEntriesCount

Environment:
    MONGO_URI / MONGODB_URI, MONGO_DB_NAME, DRY_RUN, FORCE_EXECUTE,
    SANITIZATION_REPORT_DIR, SANITIZATION_SAMPLE_SIZE, LOG_LEVEL

Via docker:
    docker-compose exec refguard python manage.py sanitize
"""
import argparse
import dataclasses
import sys
from pathlib import Path

# Add api directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))


def build_config(args):
    """default_config with CLI overrides applied"""
    from config import default_config

    sanitization = default_config.sanitization
    overrides = {}
    if getattr(args, 'execute', False):
        overrides['dry_run'] = False
    if getattr(args, 'force', False):
        overrides['force_execute'] = True
    if getattr(args, 'report_dir', None):
        overrides['report_dir'] = Path(args.report_dir)
    if overrides:
        sanitization = dataclasses.replace(sanitization, **overrides)
    return dataclasses.replace(default_config, sanitization=sanitization)


def build_logger(config):
    from services.logger import Logger, LogLevel
    return Logger(level=LogLevel.from_name(config.logging.level))


def open_store(config):
    from store.connection import connect_store
    return connect_store(config.database)


def cmd_sanitize(args):
    """Run the full discovery / cleanup / verification pipeline"""
    from orchestration import SanitizationOrchestrator

    config = build_config(args)
    orchestrator = SanitizationOrchestrator(config, build_logger(config))
    return orchestrator.run().exit_code


def cmd_discover(args):
    """Print discovered issues without writing anything"""
    from operations.operations_factory import OperationsFactory

    config = build_config(args)
    store = open_store(config)
    try:
        discovery = OperationsFactory.create_discovery(store, sample_size=config.sanitization.sample_size)
        issues = discovery.discover_all_issues()
    finally:
        store.close()

    if not issues:
        print("No issues found.")
        return 0

    for issue in issues:
        print(f"[{issue.category.value}] {issue.collection}.{issue.field}: {issue.description} ({issue.count})")
        if args.verbose and issue.sample_ids:
            print(f"    Sample IDs: {', '.join(issue.sample_ids)}")

    if args.write_report:
        generator = OperationsFactory.create_report_generator(config.sanitization.report_dir)
        path = generator.write_report_to_file(generator.generate_report(issues, dry_run=True))
        print(f"\nReport written to: {path}")
    return 0


def cmd_verify(args):
    """Run integrity checks; exit 1 if a hard check fails"""
    from operations.integrity_checker import print_verification_results
    from operations.operations_factory import OperationsFactory

    config = build_config(args)
    store = open_store(config)
    try:
        result = OperationsFactory.create_integrity_checker(store).verify_database_integrity()
    finally:
        store.close()

    print_verification_results(result, build_logger(config))
    return 0 if result.hard_passed else 1


def cmd_sanitize_collection(args):
    """Sanitize a single collection"""
    from operations.sanitizers import get_sanitizer

    try:
        sanitizer_class = get_sanitizer(args.collection)
    except KeyError:
        print(f"Error: unknown collection '{args.collection}'")
        return 1

    config = build_config(args)
    store = open_store(config)
    try:
        result = sanitizer_class(store).sanitize(dry_run=not args.execute)
    finally:
        store.close()

    print(f"{result.collection}: scanned={result.records_scanned} "
          f"cleaned={result.records_cleaned} skipped={result.records_skipped}")
    for key, value in result.details.items():
        print(f"  {key}: {value}")
    for error in result.errors:
        print(f"  ERROR: {error}")
    if not args.execute:
        print("\nDry run. Run with --execute to apply.")
    return 0 if result.succeeded else 1


def cmd_backfill_counts(args):
    """Backfill validEntriesCount on collections missing it"""
    from operations.operations_factory import OperationsFactory

    config = build_config(args)
    store = open_store(config)
    try:
        result = OperationsFactory.create_backfiller(store).backfill(dry_run=not args.execute)
    finally:
        store.close()

    if args.execute:
        print(f"Updated {result.records_cleaned} of {result.records_scanned} collections")
    else:
        print(f"{result.records_skipped} of {result.records_scanned} collections need a count")
        print("\nRun with --execute to apply.")
    return 0 if result.succeeded else 1


def build_parser():
    parser = argparse.ArgumentParser(
        description='Refguard Sanitization CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # sanitize
    p = subparsers.add_parser('sanitize', help='Run the full sanitization pipeline')
    p.add_argument('--execute', action='store_true', help='Disable dry run (same as DRY_RUN=false)')
    p.add_argument('--force', action='store_true', help='Confirm cleanup (same as FORCE_EXECUTE=true)')
    p.add_argument('--report-dir', help='Directory for report files')
    p.set_defaults(func=cmd_sanitize)

    # discover
    p = subparsers.add_parser('discover', help='List integrity issues (read-only)')
    p.add_argument('-v', '--verbose', action='store_true', help='Show sample IDs')
    p.add_argument('--write-report', action='store_true', help='Also write the Markdown report')
    p.add_argument('--report-dir', help='Directory for report files')
    p.set_defaults(func=cmd_discover)

    # verify
    p = subparsers.add_parser('verify', help='Run integrity checks')
    p.set_defaults(func=cmd_verify)

    # sanitize-collection
    p = subparsers.add_parser('sanitize-collection', help='Sanitize a single collection')
    p.add_argument('collection', help='Collection name (e.g. bookmarks, bookmarkfolderlinks)')
    p.add_argument('--execute', action='store_true', help='Apply changes (default is dry run)')
    p.set_defaults(func=cmd_sanitize_collection)

    # backfill-counts
    p = subparsers.add_parser('backfill-counts', help='Backfill missing validEntriesCount')
    p.add_argument('--execute', action='store_true', help='Apply changes (default is dry run)')
    p.set_defaults(func=cmd_backfill_counts)

    return parser


def main(argv=None):
    from config import default_config
    from logging_config import configure_logging

    configure_logging(default_config.logging.level)
    args = build_parser().parse_args(argv)
    sys.exit(args.func(args))


if __name__ == '__main__':
    main()
