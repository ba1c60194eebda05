"""Tests for configuration loading."""

import os
import tempfile

import pytest
import yaml

from vertexpath.config import AppConfig, config_from_dict, load_config, validate_config


@pytest.fixture
def config_file():
    """Create a temporary config file."""
    config_data = {
        "database": {"url": "postgres://user:pw@db.example.com/vertexpath"},
        "uploads": {"avatar_dir": "/srv/avatars", "public_base_url": "https://cdn.example.com/avatars"},
        "web": {"port": 9000, "user_header": "X-Auth-User"},
        "log_level": "debug",
    }

    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config_data, f)
        path = f.name

    yield path
    os.unlink(path)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "VERTEXPATH_AVATAR_DIR", "VERTEXPATH_PUBLIC_BASE_URL", "PORT"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_loads_valid_config(self, config_file):
        config = load_config(config_file)
        assert config.database.url == "postgres://user:pw@db.example.com/vertexpath"
        assert config.uploads.avatar_dir == "/srv/avatars"
        assert config.web.port == 9000
        assert config.web.user_header == "X-Auth-User"
        assert config.log_level == "DEBUG"

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_defaults_applied(self):
        config = config_from_dict({})
        assert config.database.url == "sqlite:///data/vertexpath.db"
        assert config.uploads.public_base_url == "/avatars"
        assert config.uploads.max_bytes == 5 * 1024 * 1024
        assert config.web.user_header == "X-User-Id"

    def test_env_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp/override.db")
        monkeypatch.setenv("PORT", "8123")
        config = load_config(config_file)
        assert config.database.url == "sqlite:///tmp/override.db"
        assert config.web.port == 8123


class TestValidateConfig:
    def test_sqlite_warns(self):
        warnings = validate_config(AppConfig())
        assert any("sqlite" in w.lower() for w in warnings)

    def test_bad_upload_limit_warns(self):
        config = AppConfig()
        config.uploads.max_bytes = 0
        assert any("max_bytes" in w for w in validate_config(config))

    def test_missing_identity_header_warns(self):
        config = AppConfig()
        config.web.user_header = ""
        assert any("identity header" in w.lower() for w in validate_config(config))

    def test_valid_config_no_critical_warnings(self, config_file):
        warnings = validate_config(load_config(config_file))
        assert warnings == []
