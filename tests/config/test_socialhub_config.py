"""Tests for app configuration."""

from pathlib import Path

from socialhub.config.app_config import (
    AppConfig,
    CONFIG_FILE,
    clear_config_cache,
    load_app_config,
)


class TestLoadAppConfig:
    """Tests for load_app_config function."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Without a config file, built-in defaults are used."""
        monkeypatch.chdir(tmp_path)
        clear_config_cache()
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.database.path == "db/socialhub.db"
        assert config.feed.page_size == 20
        assert config.feed.api_default_limit == 10
        assert config.feed.api_max_limit == 100
        assert "drawings" in config.storage.buckets

    def test_file_values_merge_over_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / CONFIG_FILE
        config_file.parent.mkdir(parents=True)
        config_file.write_text(
            "server:\n  port: 9000\nfeed:\n  page_size: 5\nlogging:\n  level: debug\n",
            encoding="utf-8",
        )
        clear_config_cache()
        config = load_app_config()
        assert config.server.port == 9000
        assert config.server.host == "127.0.0.1"
        assert config.feed.page_size == 5
        assert config.feed.api_max_limit == 100
        assert config.logging.level == "DEBUG"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SOCIALHUB_DB_PATH", "/tmp/x.db")
        monkeypatch.setenv("SOCIALHUB_PUBLIC_URL", "https://hub.example.com/")
        clear_config_cache()
        config = load_app_config()
        assert config.database.path == "/tmp/x.db"
        assert config.storage.public_url == "https://hub.example.com"

    def test_cache(self, tmp_path, monkeypatch):
        """Config is cached until force_reload or clear_config_cache."""
        monkeypatch.chdir(tmp_path)
        clear_config_cache()
        first = load_app_config()
        assert load_app_config() is first
        assert load_app_config(force_reload=True) is not first

    def test_config_file_path(self):
        assert CONFIG_FILE == Path("data/config/app_config_v1.yaml")
