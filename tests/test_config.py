"""
Unit tests for config module and environment loading
"""
import pytest
from pathlib import Path

from config import (
    Config,
    DatabaseConfig,
    SanitizationConfig,
    DEFAULT_DATABASE_NAME,
    REPORT_FILENAME,
)
from environment_config_loader import EnvironmentConfigLoader


class TestDatabaseConfig:
    """Tests for DatabaseConfig"""

    def test_default_values(self):
        """Test default values"""
        config = DatabaseConfig()
        assert config.uri == ""
        assert config.database == "nuggets"
        assert config.server_selection_timeout_ms == 10000
        assert not config.is_configured

    def test_database_name_from_uri(self):
        """Database name in the URI path wins over the default"""
        config = DatabaseConfig.from_uri("mongodb://localhost:27017/production?retryWrites=true")
        assert config.database == "production"
        assert config.is_configured

    def test_default_database_when_uri_has_none(self):
        """URI without a path falls back to the default name"""
        config = DatabaseConfig.from_uri("mongodb+srv://user:pw@cluster.example.net/?retryWrites=true")
        assert config.database == DEFAULT_DATABASE_NAME

    def test_custom_default_database(self):
        config = DatabaseConfig.from_uri("mongodb://localhost:27017", default_database="staging")
        assert config.database == "staging"


class TestSanitizationConfig:
    """Tests for SanitizationConfig"""

    def test_defaults_are_safe(self):
        """Default mode is a dry run without force"""
        config = SanitizationConfig()
        assert config.dry_run is True
        assert config.force_execute is False
        assert config.sample_size == 5

    def test_report_path(self, tmp_path):
        config = SanitizationConfig(report_dir=tmp_path)
        assert config.report_path == tmp_path / REPORT_FILENAME


class TestEnvironmentConfigLoader:
    """Tests for EnvironmentConfigLoader"""

    def test_empty_environment(self):
        """Empty environment gives a dry run with no URI"""
        config = EnvironmentConfigLoader(environ={}).load()
        assert isinstance(config, Config)
        assert config.database.uri == ""
        assert config.sanitization.dry_run is True
        assert config.sanitization.force_execute is False
        assert config.sanitization.report_dir == Path(".")
        assert config.logging.level == "INFO"

    def test_mongo_uri_preferred_over_mongodb_uri(self):
        environ = {
            "MONGO_URI": "mongodb://primary:27017/app",
            "MONGODB_URI": "mongodb://secondary:27017/other",
        }
        config = EnvironmentConfigLoader(environ=environ).load()
        assert config.database.uri == "mongodb://primary:27017/app"
        assert config.database.database == "app"

    def test_mongodb_uri_fallback(self):
        environ = {"MONGODB_URI": "mongodb://secondary:27017"}
        config = EnvironmentConfigLoader(environ=environ).load()
        assert config.database.uri == "mongodb://secondary:27017"
        assert config.database.database == "nuggets"

    def test_db_name_env_used_when_uri_has_none(self):
        environ = {"MONGO_URI": "mongodb://localhost:27017", "MONGO_DB_NAME": "custom"}
        config = EnvironmentConfigLoader(environ=environ).load()
        assert config.database.database == "custom"

    @pytest.mark.parametrize("value,expected", [
        ("false", False),
        ("False", True),
        ("0", True),
        ("no", True),
        ("true", True),
        ("", True),
    ])
    def test_dry_run_only_disabled_by_exact_false(self, value, expected):
        """Only the exact string "false" turns dry run off"""
        config = EnvironmentConfigLoader(environ={"DRY_RUN": value}).load()
        assert config.sanitization.dry_run is expected

    @pytest.mark.parametrize("value,expected", [
        ("true", True),
        ("TRUE", False),
        ("True", False),
        (" true", False),
        ("1", False),
        ("yes", False),
    ])
    def test_force_execute_only_enabled_by_exact_true(self, value, expected):
        """Only the exact string "true" confirms cleanup"""
        config = EnvironmentConfigLoader(environ={"FORCE_EXECUTE": value}).load()
        assert config.sanitization.force_execute is expected

    def test_numeric_and_path_settings(self):
        environ = {
            "SANITIZATION_REPORT_DIR": "/tmp/reports",
            "SANITIZATION_SAMPLE_SIZE": "3",
            "MONGO_SERVER_SELECTION_TIMEOUT_MS": "2500",
            "LOG_LEVEL": "debug",
        }
        config = EnvironmentConfigLoader(environ=environ).load()
        assert config.sanitization.report_dir == Path("/tmp/reports")
        assert config.sanitization.sample_size == 3
        assert config.database.server_selection_timeout_ms == 2500
        assert config.logging.level == "DEBUG"
