"""CLI entry point — database setup, profile inspection, API server."""

import argparse
import asyncio
import logging
import sys

from vertexpath.config import AppConfig, load_config, validate_config
from vertexpath.models import create_session_factory
from vertexpath.profile.completion import completion_score, missing_fields
from vertexpath.profile.engine import ProfileStateEngine
from vertexpath.profile.errors import PersistenceError
from vertexpath.storage.avatar_uploader import LocalAvatarUploader
from vertexpath.storage.profile_store import SqlProfileStore
from vertexpath.utils.logging_config import setup_logging

logger = logging.getLogger("vertexpath")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="VertexPath - career profile service",
    )
    parser.add_argument(
        "--config", default="config.yaml",
        help="Path to config file (default: config.yaml; built-in defaults if missing)",
    )
    parser.add_argument(
        "--init-db", action="store_true",
        help="Create database tables and exit",
    )
    parser.add_argument(
        "--show", metavar="USER_ID",
        help="Print a stored profile's completion and missing fields, then exit",
    )
    parser.add_argument(
        "--serve", action="store_true",
        help="Run the HTTP API",
    )
    return parser.parse_args(argv)


def _load_config_or_defaults(path: str) -> AppConfig:
    try:
        return load_config(path)
    except FileNotFoundError:
        if path != "config.yaml":
            raise
        return AppConfig()


def show_profile(config: AppConfig, user_id: str) -> int:
    """Print completion details for one stored profile. Returns an exit code."""
    store = SqlProfileStore(create_session_factory(config.database.url))
    try:
        persisted = asyncio.run(store.load_by_id(user_id))
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if persisted is None:
        print(f"No stored profile for user {user_id}")
        return 1

    engine = ProfileStateEngine(
        store,
        LocalAvatarUploader(config.uploads.avatar_dir, config.uploads.public_base_url, config.uploads.max_bytes),
    )
    engine.initialize(user_id)
    engine.reconcile(persisted)

    draft = engine.draft
    print(f"\n=== Profile {user_id} ===")
    print(f"Name: {draft.full_name or '-'}")
    print(f"Status: {draft.current_status}")
    print(f"Target job: {draft.target_job or '-'}")
    print(f"Skills: {', '.join(draft.skills) if draft.skills else '-'}")
    print(f"Completion: {completion_score(draft)}%")
    missing = missing_fields(draft)
    if missing:
        print(f"Missing: {', '.join(missing)}")
    print()
    return 0


def serve(config: AppConfig):
    import uvicorn

    from vertexpath.web.app import create_app

    app = create_app(config)
    # log_config=None keeps the handlers from setup_logging()
    uvicorn.run(app, host=config.web.host, port=config.web.port, log_config=None)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = _load_config_or_defaults(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_dir, config.log_level)

    for w in validate_config(config):
        logger.warning("Config: %s", w)

    if args.init_db:
        store = SqlProfileStore(create_session_factory(config.database.url))
        store.create_tables()
        logger.info("Database tables created at %s", config.database.url)
        return

    if args.show:
        sys.exit(show_profile(config, args.show))

    if args.serve:
        serve(config)
        return

    print("Nothing to do. Use --init-db, --show USER_ID or --serve.", file=sys.stderr)
    sys.exit(2)


if __name__ == "__main__":
    main()
