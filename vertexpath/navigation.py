"""Section routing — which part of the app the user is looking at."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger("vertexpath.navigation")

SECTIONS = ("home", "profile", "upload", "analysis", "roadmap", "courses", "community")
DEFAULT_SECTION = "home"

# Where the user lands after saving their profile
AFTER_PROFILE_SAVE = "roadmap"


@dataclass(frozen=True)
class NavigationEvent:
    previous: str
    current: str
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SectionRouter:
    """Owns the current section and a log of navigation events."""

    def __init__(self, initial: str = DEFAULT_SECTION, max_history: int = 50):
        if initial not in SECTIONS:
            raise ValueError(f"Unknown section: {initial!r}")
        self.current = initial
        self.max_history = max_history
        self.history: list[NavigationEvent] = []

    def navigate(self, section: str) -> NavigationEvent:
        if section not in SECTIONS:
            raise ValueError(f"Unknown section: {section!r} (expected one of {', '.join(SECTIONS)})")
        event = NavigationEvent(previous=self.current, current=section)
        self.current = section
        self.history.append(event)
        if len(self.history) > self.max_history:
            del self.history[: len(self.history) - self.max_history]
        logger.debug("Navigated %s -> %s", event.previous, event.current)
        return event
