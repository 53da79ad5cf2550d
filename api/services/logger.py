# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Logger service - console output for operator-facing runs.

The sanitization CLI prints a structured, ordered summary per phase.
Routing it through this service keeps that output testable and lets
the level be configured.
"""

from enum import Enum
import sys

RULE_WIDTH = 80


class LogLevel(Enum):
    """Console levels, ordered by severity"""
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Map a LOG_LEVEL string to a level, defaulting to INFO"""
        return cls.__members__.get((name or "").upper(), cls.INFO)


# INFO lines are printed bare so summaries read as plain text
_PREFIXES = {
    LogLevel.DEBUG: "DEBUG: ",
    LogLevel.INFO: "",
    LogLevel.WARNING: "WARNING: ",
    LogLevel.ERROR: "ERROR: ",
}


class Logger:
    """Console logger for phase banners and summaries.

    Lines below the configured level are dropped.
    """

    def __init__(self, level: LogLevel = LogLevel.INFO, output=None):
        self.level = level
        self.output = output or sys.stdout

    def enabled(self, level: LogLevel) -> bool:
        return level.value >= self.level.value

    def debug(self, message: str):
        self._emit(LogLevel.DEBUG, message)

    def info(self, message: str = ""):
        self._emit(LogLevel.INFO, message)

    def warning(self, message: str):
        self._emit(LogLevel.WARNING, message)

    def error(self, message: str):
        self._emit(LogLevel.ERROR, message)

    def rule(self, char: str = "="):
        """Horizontal separator at INFO"""
        self.info(char * RULE_WIDTH)

    def banner(self, title: str):
        """Title framed by separators"""
        self.rule()
        self.info(title)
        self.rule()

    def _emit(self, level: LogLevel, message: str):
        if self.enabled(level):
            print(f"{_PREFIXES[level]}{message}", file=self.output)
