"""Filesystem avatar storage with public URLs."""

import asyncio
import logging
import time
from pathlib import Path

from vertexpath.profile.avatar import sniff_image_type
from vertexpath.profile.errors import UploadError
from vertexpath.profile.models import AvatarBinary

logger = logging.getLogger("vertexpath.storage")


class LocalAvatarUploader:
    """AssetUploader writing ``<avatar_dir>/<user_id>/<epoch_ms>.<ext>``.

    The returned reference is ``<public_base_url>/<user_id>/<file>``; serving
    the directory under that URL is the web layer's job.
    """

    def __init__(self, avatar_dir: str, public_base_url: str, max_bytes: int = 5 * 1024 * 1024):
        self.avatar_dir = Path(avatar_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes

    async def store(self, user_id: str, avatar: AvatarBinary) -> str:
        if not avatar.content:
            raise UploadError("Avatar file is empty")
        if avatar.size > self.max_bytes:
            raise UploadError(
                f"Avatar is {avatar.size} bytes, limit is {self.max_bytes} bytes"
            )
        if not user_id or "/" in user_id or user_id in (".", ".."):
            raise UploadError(f"Invalid user id for avatar storage: {user_id!r}")

        sniffed = sniff_image_type(avatar.content)
        if sniffed is None:
            raise UploadError("Refusing to store an avatar that is not a PNG, JPEG, GIF or WEBP image")

        filename = f"{int(time.time() * 1000)}.{sniffed[1]}"
        await asyncio.to_thread(self._write, user_id, filename, avatar.content)
        url = f"{self.public_base_url}/{user_id}/{filename}"
        logger.info("Stored avatar for user %s (%d bytes) at %s", user_id, avatar.size, url)
        return url

    def _write(self, user_id: str, filename: str, content: bytes) -> None:
        user_dir = self.avatar_dir / user_id
        try:
            user_dir.mkdir(parents=True, exist_ok=True)
            with open(user_dir / filename, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error("Failed to write avatar for user %s: %s", user_id, e)
            raise UploadError(f"Could not store avatar: {e}") from e
