# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Startup checks run before a sanitization run or API start"""

from .config_validator import ConfigValidationError, ConfigValidator

__all__ = ['ConfigValidationError', 'ConfigValidator']
