"""SQL-backed profile store."""

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vertexpath.models import Base, Profile
from vertexpath.profile.errors import PersistenceError
from vertexpath.profile.models import PersistedProfile

logger = logging.getLogger("vertexpath.storage")

# Columns an upsert may write; anything else in a record is ignored
_WRITABLE = {
    column.name
    for column in Profile.__table__.columns
    if column.name not in ("id", "created_at", "updated_at")
}


class SqlProfileStore:
    """ProfileStore over the ``profiles`` table.

    Blocking SQLAlchemy calls are pushed to a worker thread so the engine's
    ``save()`` can await them.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_tables(self):
        Base.metadata.create_all(self._session_factory.kw["bind"])

    async def load_by_id(self, user_id: str) -> Optional[PersistedProfile]:
        return await asyncio.to_thread(self._load_sync, user_id)

    async def upsert(self, user_id: str, record: dict) -> None:
        await asyncio.to_thread(self._upsert_sync, user_id, record)

    def _load_sync(self, user_id: str) -> Optional[PersistedProfile]:
        db: Session = self._session_factory()
        try:
            row = db.get(Profile, user_id)
            return row.to_persisted() if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to load profile %s: %s", user_id, e)
            raise PersistenceError(f"Database error while loading profile: {e}") from e
        finally:
            db.close()

    def _upsert_sync(self, user_id: str, record: dict) -> None:
        db: Session = self._session_factory()
        try:
            row = db.get(Profile, user_id)
            if row is None:
                row = Profile(id=user_id)
                db.add(row)
            # Keys missing from the record keep their stored value
            for key, value in record.items():
                if key in _WRITABLE:
                    setattr(row, key, value)
            db.commit()
            logger.debug("Upserted profile %s (%d fields)", user_id, len(record))
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to upsert profile %s: %s", user_id, e)
            raise PersistenceError(f"Database error while saving profile: {e}") from e
        finally:
            db.close()
