# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Configuration validator for startup checks.

Validates configuration settings early to provide clear error messages
before the sanitizer attempts to connect or write report files.
"""
import os
from typing import List

SUPPORTED_SCHEMES = ("mongodb://", "mongodb+srv://")


class ConfigValidationError(Exception):
    """Configuration validation failed"""
    pass


class ConfigValidator:
    """Validates configuration settings before a sanitization run"""

    def __init__(self, config):
        self.config = config
        self.errors: List[str] = []

    def validate(self) -> None:
        """Validate all configuration settings

        Raises:
            ConfigValidationError: If validation fails
        """
        self._validate_connection_uri()
        self._validate_report_dir()

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )
            raise ConfigValidationError(error_msg)

    def _validate_connection_uri(self) -> None:
        """Validate document store connection string"""
        uri = self.config.database.uri

        if not self.config.database.is_configured:
            self.errors.append(
                "MONGO_URI or MONGODB_URI is not set\n"
                "    Set it in .env, e.g. MONGO_URI=mongodb://localhost:27017/nuggets"
            )
            return

        if not uri.startswith(SUPPORTED_SCHEMES):
            self.errors.append(
                f"Unsupported connection string scheme: {uri.split(':', 1)[0]}\n"
                f"    Expected one of: {', '.join(SUPPORTED_SCHEMES)}"
            )

    def _validate_report_dir(self) -> None:
        """Validate directory that receives report files"""
        report_dir = self.config.sanitization.report_dir

        if not report_dir.exists():
            self._create_report_dir(report_dir)
            return

        if not report_dir.is_dir():
            self.errors.append(
                f"Report path is not a directory: {report_dir}\n"
                f"    Update SANITIZATION_REPORT_DIR in .env to point to a directory"
            )
            return

        if not os.access(report_dir, os.W_OK):
            self.errors.append(
                f"Report directory is not writable: {report_dir}\n"
                f"    Fix with: chmod +w {report_dir}"
            )

    def _create_report_dir(self, report_dir):
        """Create report directory if it doesn't exist"""
        try:
            report_dir.mkdir(parents=True, exist_ok=True)
            print(f"Created report directory: {report_dir}")
        except PermissionError:
            self.errors.append(
                f"Cannot create report directory (permission denied): {report_dir}\n"
                f"    Fix with: sudo mkdir -p {report_dir} && sudo chown $USER {report_dir}"
            )
        except OSError as e:
            self.errors.append(
                f"Cannot create report directory: {report_dir}\n"
                f"    Error: {e}"
            )
