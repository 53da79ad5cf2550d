# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Environment configuration loader.

Fixes Feature Envy: Logic for reading environment variables
lives with the data source (environment) rather than in Config dataclass.
"""
import os
from pathlib import Path

from config import (
    Config, DatabaseConfig, SanitizationConfig, LoggingConfig,
    DEFAULT_DATABASE_NAME,
)


class EnvironmentConfigLoader:
    """Loads configuration from environment variables.

    Single Responsibility: Environment access logic.
    """

    def __init__(self, environ=None):
        self.environ = os.environ if environ is None else environ

    def load(self) -> Config:
        """Create Config from environment variables"""
        return Config(
            database=self._load_database_config(),
            sanitization=self._load_sanitization_config(),
            logging=self._load_logging_config()
        )

    def _load_database_config(self) -> DatabaseConfig:
        """Load document store configuration from environment"""
        uri = self._get_optional("MONGO_URI", "") or self._get_optional("MONGODB_URI", "")
        default_name = self._get_optional("MONGO_DB_NAME", DEFAULT_DATABASE_NAME)
        config = DatabaseConfig.from_uri(uri, default_database=default_name)
        config.server_selection_timeout_ms = self._get_int(
            "MONGO_SERVER_SELECTION_TIMEOUT_MS", 10000
        )
        return config

    def _load_sanitization_config(self) -> SanitizationConfig:
        """Load run-mode configuration from environment"""
        return SanitizationConfig(
            dry_run=self._get_dry_run(),
            force_execute=self._get_force_execute(),
            report_dir=Path(self._get_optional("SANITIZATION_REPORT_DIR", ".")),
            sample_size=self._get_int("SANITIZATION_SAMPLE_SIZE", 5)
        )

    def _load_logging_config(self) -> LoggingConfig:
        """Load logging configuration from environment"""
        return LoggingConfig(
            level=self._get_optional("LOG_LEVEL", "INFO").upper()
        )

    def _get_dry_run(self) -> bool:
        """Dry run stays on unless DRY_RUN is exactly "false" """
        return self.environ.get("DRY_RUN") != "false"

    def _get_force_execute(self) -> bool:
        """Cleanup is confirmed only when FORCE_EXECUTE is exactly "true" """
        return self.environ.get("FORCE_EXECUTE") == "true"

    def _get_optional(self, key: str, default: str) -> str:
        """Get optional string environment variable"""
        return self.environ.get(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable"""
        value = self.environ.get(key, str(default))
        return int(value)
