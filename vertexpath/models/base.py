"""SQLAlchemy engine and session setup."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres:// but SQLAlchemy 2.x requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def build_engine(url: str) -> Engine:
    url = normalize_database_url(url)
    connect_args = {}
    if url.startswith("sqlite"):
        db_path = url.split("///", 1)[-1] if "///" in url else ""
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        # Store calls run in worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, echo=False, connect_args=connect_args)


def create_session_factory(url: str) -> sessionmaker:
    return sessionmaker(bind=build_engine(url), autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass
