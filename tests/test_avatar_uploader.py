"""Tests for filesystem avatar storage."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from conftest import PNG_BYTES
from vertexpath.profile.errors import UploadError
from vertexpath.profile.models import AvatarBinary
from vertexpath.storage.avatar_uploader import LocalAvatarUploader


@pytest.fixture
def avatar_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestLocalAvatarUploader:
    def test_store_writes_file_and_returns_url(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "https://cdn.example.com/avatars/")
        url = asyncio.run(uploader.store("u1", AvatarBinary(content=PNG_BYTES, filename="me.png")))

        assert url.startswith("https://cdn.example.com/avatars/u1/")
        assert url.endswith(".png")
        stored = avatar_dir / "u1" / url.rsplit("/", 1)[-1]
        assert stored.read_bytes() == PNG_BYTES

    def test_extension_sniffed_without_filename(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "/avatars")
        url = asyncio.run(uploader.store("u1", AvatarBinary(content=b"\xff\xd8\xff\xe0data")))
        assert url.startswith("/avatars/u1/")
        assert url.endswith(".jpg")

    def test_too_large_rejected(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "/avatars", max_bytes=10)
        with pytest.raises(UploadError, match="limit"):
            asyncio.run(uploader.store("u1", AvatarBinary(content=PNG_BYTES)))
        assert not (avatar_dir / "u1").exists()

    def test_empty_rejected(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "/avatars")
        with pytest.raises(UploadError):
            asyncio.run(uploader.store("u1", AvatarBinary(content=b"")))

    def test_path_like_user_id_rejected(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "/avatars")
        with pytest.raises(UploadError):
            asyncio.run(uploader.store("../etc", AvatarBinary(content=PNG_BYTES)))

    def test_non_image_rejected(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "/avatars")
        with pytest.raises(UploadError):
            asyncio.run(uploader.store("u1", AvatarBinary(content=b"<html></html>", filename="x.html")))
        assert not (avatar_dir / "u1").exists()

    def test_extension_comes_from_bytes_not_filename(self, avatar_dir):
        uploader = LocalAvatarUploader(str(avatar_dir), "/avatars")
        url = asyncio.run(uploader.store("u1", AvatarBinary(content=PNG_BYTES, filename="x.html")))
        assert url.endswith(".png")
