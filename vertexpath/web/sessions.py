"""In-process registry of profile editing sessions, one per user."""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from vertexpath.navigation import SectionRouter
from vertexpath.profile.completion import missing_fields
from vertexpath.profile.engine import AssetUploader, ProfileStateEngine, ProfileStore

logger = logging.getLogger("vertexpath.web.sessions")

MAX_ROUTERS = 1000


@dataclass
class UserSession:
    engine: ProfileStateEngine
    router: SectionRouter


class SessionRegistry:
    def __init__(
        self,
        store: ProfileStore,
        uploader: AssetUploader,
        max_avatar_bytes: Optional[int] = None,
        max_routers: int = MAX_ROUTERS,
    ):
        self.store = store
        self.uploader = uploader
        self.max_avatar_bytes = max_avatar_bytes
        self.max_routers = max_routers
        self._sessions: dict[str, UserSession] = {}
        self._routers: OrderedDict[str, SectionRouter] = OrderedDict()

    def router_for(self, user_id: str) -> SectionRouter:
        """Navigation outlives editing sessions, so routers are kept separately.

        Routers of users without an editing session are evicted oldest first
        once more than ``max_routers`` are held.
        """
        router = self._routers.get(user_id)
        if router is None:
            router = self._routers[user_id] = SectionRouter()
            self._evict_routers()
        else:
            self._routers.move_to_end(user_id)
        return router

    def get(self, user_id: str) -> UserSession | None:
        return self._sessions.get(user_id)

    def start(self, user_id: str) -> UserSession:
        """Create (or replace) the user's session with a freshly initialized engine."""
        engine = ProfileStateEngine(self.store, self.uploader, max_avatar_bytes=self.max_avatar_bytes)
        engine.initialize(user_id)
        session = UserSession(engine=engine, router=self.router_for(user_id))
        previous = self._sessions.get(user_id)
        if previous is not None:
            logger.info("[user:%s] Replacing existing editing session", user_id)
        self._sessions[user_id] = session
        return session

    def end(self, user_id: str) -> bool:
        self._routers.pop(user_id, None)
        return self._sessions.pop(user_id, None) is not None

    def clear(self):
        self._sessions.clear()
        self._routers.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_routers(self):
        for user_id in list(self._routers):
            if len(self._routers) <= self.max_routers:
                break
            if user_id not in self._sessions:
                del self._routers[user_id]


def profile_view(engine: ProfileStateEngine) -> dict:
    """JSON view of an engine. Hidden fields are not surfaced."""
    draft = engine.draft
    visible = engine.visible_fields
    return {
        "state": engine.state.value,
        "user_id": draft.user_id,
        "fields": {name: value for name, value in draft.scalars().items() if name in visible},
        "skills": list(draft.skills),
        "avatar": {
            "display": draft.display_avatar,
            "url": draft.avatar_url,
            "pending": draft.pending_avatar is not None,
        },
        "completion": engine.completion,
        "missing_fields": missing_fields(draft),
        "visible_fields": sorted(visible),
        "field_labels": engine.field_labels,
        "dirty": engine.is_dirty,
    }
