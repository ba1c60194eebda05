"""Tests for the CLI entry point."""

import asyncio
import os
import tempfile

import pytest

from vertexpath.config import AppConfig
from vertexpath.main import parse_args, show_profile
from vertexpath.models import create_session_factory
from vertexpath.storage.profile_store import SqlProfileStore


@pytest.fixture
def config():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = AppConfig()
        config.database.url = f"sqlite:///{os.path.join(tmpdir, 'cli.db')}"
        config.uploads.avatar_dir = os.path.join(tmpdir, "avatars")
        factory = create_session_factory(config.database.url)
        store = SqlProfileStore(factory)
        store.create_tables()
        asyncio.run(store.upsert("u1", {
            "full_name": "Ada",
            "current_status": "student",
            "education_level": "UG",
            "target_job": "Engineer",
            "skills": "Python, SQL",
        }))
        factory.kw["bind"].dispose()
        yield config


class TestCli:
    def test_parse_args(self):
        args = parse_args(["--show", "u1", "--config", "other.yaml"])
        assert args.show == "u1"
        assert args.config == "other.yaml"
        assert not args.serve

    def test_show_profile(self, config, capsys):
        assert show_profile(config, "u1") == 0
        out = capsys.readouterr().out
        assert "Ada" in out
        assert "Completion: 60%" in out
        assert "Python, SQL" in out

    def test_show_missing_profile(self, config, capsys):
        assert show_profile(config, "nobody") == 1
        assert "No stored profile" in capsys.readouterr().out
