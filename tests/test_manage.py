"""
Tests for the manage.py CLI
"""
import pytest
from unittest.mock import patch


@pytest.fixture
def cli(store, tmp_path, monkeypatch):
    """manage module with the store factory pointed at the in-memory store"""
    import manage
    from config import default_config

    monkeypatch.setattr(default_config.sanitization, 'report_dir', tmp_path)
    monkeypatch.setattr(default_config.sanitization, 'dry_run', True)
    monkeypatch.setattr(default_config.database, 'uri', 'mongodb://localhost:27017/nuggets')
    monkeypatch.setattr(manage, 'open_store', lambda config: store)
    return manage


def run_cli(cli, argv):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
    return exc_info.value.code


class TestBuildConfig:

    def test_execute_and_force_flags(self, cli):
        args = cli.build_parser().parse_args(['sanitize', '--execute', '--force'])
        config = cli.build_config(args)

        assert config.sanitization.dry_run is False
        assert config.sanitization.force_execute is True

    def test_report_dir_override(self, cli, tmp_path):
        args = cli.build_parser().parse_args(['discover', '--report-dir', str(tmp_path / 'r')])
        assert cli.build_config(args).sanitization.report_dir == tmp_path / 'r'

    def test_defaults_untouched(self, cli):
        from config import default_config

        args = cli.build_parser().parse_args(['verify'])
        config = cli.build_config(args)

        assert config.sanitization.dry_run == default_config.sanitization.dry_run


class TestCommands:

    def test_discover(self, cli, dirty_db, capsys):
        assert run_cli(cli, ['discover', '-v']) == 0
        out = capsys.readouterr().out
        assert '[SAFE_AUTO_FIX] Bookmark.userId' in out
        assert 'Sample IDs:' in out

    def test_discover_writes_report(self, cli, dirty_db, tmp_path, capsys):
        assert run_cli(cli, ['discover', '--write-report']) == 0
        assert (tmp_path / 'DATABASE_SANITIZATION_REPORT.md').exists()

    def test_verify_exit_code_follows_hard_checks(self, cli, dirty_db):
        assert run_cli(cli, ['verify']) == 1

    def test_verify_clean(self, cli):
        assert run_cli(cli, ['verify']) == 0

    def test_sanitize_collection_dry_run(self, cli, store, dirty_db, capsys):
        assert run_cli(cli, ['sanitize-collection', 'bookmarkfolderlinks']) == 0
        assert store.count('bookmarkfolderlinks') == 4
        assert 'Dry run' in capsys.readouterr().out

    def test_sanitize_collection_execute(self, cli, store, dirty_db):
        assert run_cli(cli, ['sanitize-collection', 'bookmarkfolderlinks', '--execute']) == 0
        assert store.count('bookmarkfolderlinks') == 3

    def test_sanitize_collection_unknown(self, cli, capsys):
        assert run_cli(cli, ['sanitize-collection', 'users']) == 1
        assert "unknown collection" in capsys.readouterr().out

    def test_backfill_counts(self, cli, seed, capsys):
        seed.collection(seed.user(), validEntriesCount=None)

        assert run_cli(cli, ['backfill-counts']) == 0
        assert '1 of 1 collections need a count' in capsys.readouterr().out

    def test_sanitize_runs_orchestrator(self, cli, store, dirty_db):
        with patch('orchestration.sanitization_orchestrator.connect_store', return_value=store):
            code = run_cli(cli, ['sanitize'])
        assert code == 0
