# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Services layer for the sanitization system.

- Logger: operator-facing console output
"""

from .logger import Logger, LogLevel

__all__ = ['Logger', 'LogLevel']
