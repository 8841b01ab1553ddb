"""Tests for the socialhub CLI."""

import pytest
from typer.testing import CliRunner

from socialhub.cli.commands import DEFAULT_TEMPLATES, app
from socialhub.config.app_config import clear_config_cache
from socialhub.db.client import get_client, reset_client

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Database path inside an isolated working directory."""
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    reset_client()
    yield str(tmp_path / "cli.db")
    reset_client()
    clear_config_cache()


class TestInitAndCheck:
    def test_init_db(self, db_path, tmp_path):
        result = runner.invoke(app, ["init-db", "--db", db_path])
        assert result.exit_code == 0, result.stdout
        assert "Database initialized" in result.stdout
        assert (tmp_path / "cli.db").exists()

    def test_check(self, db_path):
        result = runner.invoke(app, ["check", "--db", db_path])
        assert result.exit_code == 0, result.stdout
        assert "Connection OK" in result.stdout


class TestCreateUser:
    def test_create_user(self, db_path):
        result = runner.invoke(
            app,
            ["create-user", "ana@example.com", "ana", "--password", "secret123", "--name", "Ana", "--db", db_path],
        )
        assert result.exit_code == 0, result.stdout
        assert "Created user ana" in result.stdout

        users = get_client().table("users").select("username, full_name").execute().data
        assert users == [{"username": "ana", "full_name": "Ana"}]

    def test_password_prompt(self, db_path):
        result = runner.invoke(
            app,
            ["create-user", "ana@example.com", "ana", "--db", db_path],
            input="secret123\nsecret123\n",
        )
        assert result.exit_code == 0, result.stdout

    def test_duplicate_fails(self, db_path):
        args = ["create-user", "ana@example.com", "ana", "--password", "secret123", "--db", db_path]
        assert runner.invoke(app, args).exit_code == 0
        result = runner.invoke(app, args)
        assert result.exit_code == 1


class TestSeedTemplates:
    def test_seeds_once(self, db_path):
        first = runner.invoke(app, ["seed-templates", "--db", db_path])
        assert first.exit_code == 0, first.stdout

        second = runner.invoke(app, ["seed-templates", "--db", db_path])
        assert second.exit_code == 0, second.stdout
        assert "exists" in second.stdout

        names = [t["name"] for t in get_client().table("map_templates").select("name").execute().data]
        assert sorted(names) == sorted(t["name"] for t in DEFAULT_TEMPLATES)
