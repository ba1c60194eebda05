"""Shared fakes for the profile store and avatar uploader."""

import asyncio

import pytest

from vertexpath.profile.errors import PersistenceError, UploadError


class FakeStore:
    """In-memory ProfileStore that records every call."""

    def __init__(self, rows=None):
        self.rows = dict(rows or {})
        self.loads: list[str] = []
        self.upserts: list[tuple[str, dict]] = []
        self.fail_load = False
        self.fail_upsert = False
        self.gate: asyncio.Event | None = None
        self.load_gate: asyncio.Event | None = None

    async def load_by_id(self, user_id):
        self.loads.append(user_id)
        if self.load_gate is not None:
            await self.load_gate.wait()
        if self.fail_load:
            raise ConnectionError("database unreachable")
        return self.rows.get(user_id)

    async def upsert(self, user_id, record):
        self.upserts.append((user_id, dict(record)))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_upsert:
            raise PersistenceError("upsert rejected")


class FakeUploader:
    def __init__(self):
        self.calls: list[tuple[str, bytes]] = []
        self.fail = False
        self.error: Exception = UploadError("bucket unavailable")

    async def store(self, user_id, avatar):
        self.calls.append((user_id, avatar.content))
        if self.fail:
            raise self.error
        return f"https://cdn.example.com/avatars/{user_id}/{len(self.calls)}.png"


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def uploader():
    return FakeUploader()


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
