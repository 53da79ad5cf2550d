# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Centralized logging configuration for sanitization runs.

Suppresses verbose driver logging (server monitoring, heartbeats,
connection pool events) that would otherwise flood run output with
non-actionable messages.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Suppress verbose third-party library logging
_SUPPRESSED_LOGGERS = [
    'pymongo',
    'pymongo.topology',
    'pymongo.connection',
    'pymongo.serverSelection',
]


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for a CLI or server process"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    for logger_name in _SUPPRESSED_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
