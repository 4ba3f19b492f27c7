"""
Tests for the sickfits command line
"""

from unittest.mock import patch

from click.testing import CliRunner

from sickfits import __version__
from sickfits.cli import cli


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_migrate_upgrade_uses_project_config(tmp_path, monkeypatch):
    ini = tmp_path / "alembic.ini"
    ini.write_text("[alembic]\nscript_location = alembic\n")
    monkeypatch.setenv("SICKFITS_ALEMBIC_INI", str(ini))

    with patch("sickfits.cli.command.upgrade") as mock_upgrade:
        result = CliRunner().invoke(cli, ["migrate", "upgrade"])

    assert result.exit_code == 0
    config, revision = mock_upgrade.call_args[0]
    assert config.config_file_name == str(ini)
    assert revision == "head"


def test_migrate_without_config_fails(tmp_path, monkeypatch):
    monkeypatch.setenv("SICKFITS_ALEMBIC_INI", str(tmp_path / "missing.ini"))

    result = CliRunner().invoke(cli, ["migrate", "current"])

    assert result.exit_code == 1


def test_serve_runs_uvicorn():
    with patch("sickfits.cli.uvicorn.run") as mock_run:
        result = CliRunner().invoke(cli, ["serve", "--port", "5000", "--reload"])

    assert result.exit_code == 0
    args, kwargs = mock_run.call_args
    assert args[0] == "sickfits.api.app:app"
    assert kwargs["port"] == 5000
    assert kwargs["reload"] is True
