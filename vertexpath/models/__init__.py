"""ORM models for persisted profiles."""

from .base import Base, build_engine, create_session_factory, normalize_database_url
from .profile import Profile

__all__ = [
    "Base",
    "build_engine",
    "create_session_factory",
    "normalize_database_url",
    "Profile",
]
