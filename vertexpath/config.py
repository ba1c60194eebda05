"""YAML config loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///data/vertexpath.db"


@dataclass
class UploadConfig:
    avatar_dir: str = "data/avatars"
    public_base_url: str = "/avatars"
    max_bytes: int = 5 * 1024 * 1024


@dataclass
class WebConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    user_header: str = "X-User-Id"  # set by the upstream identity provider


@dataclass
class AppConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    uploads: UploadConfig = field(default_factory=UploadConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_dir: str = "logs"
    log_level: str = "INFO"


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load configuration from a YAML file. Environment variables take precedence."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Copy config.example.yaml to config.yaml and fill in your settings."
        )

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return config_from_dict(raw)


def config_from_dict(raw: dict) -> AppConfig:
    config = AppConfig()

    # Database
    db_raw = raw.get("database", {}) or {}
    config.database = DatabaseConfig(
        url=os.environ.get("DATABASE_URL", db_raw.get("url", DatabaseConfig.url)),
    )

    # Uploads
    uploads_raw = raw.get("uploads", {}) or {}
    config.uploads = UploadConfig(
        avatar_dir=os.environ.get("VERTEXPATH_AVATAR_DIR", uploads_raw.get("avatar_dir", UploadConfig.avatar_dir)),
        public_base_url=os.environ.get(
            "VERTEXPATH_PUBLIC_BASE_URL", uploads_raw.get("public_base_url", UploadConfig.public_base_url)
        ),
        max_bytes=int(uploads_raw.get("max_bytes", UploadConfig.max_bytes)),
    )

    # Web
    web_raw = raw.get("web", {}) or {}
    config.web = WebConfig(
        host=web_raw.get("host", WebConfig.host),
        port=int(os.environ.get("PORT", web_raw.get("port", WebConfig.port))),
        user_header=web_raw.get("user_header", WebConfig.user_header),
    )

    config.log_dir = raw.get("log_dir", "logs")
    config.log_level = str(raw.get("log_level", "INFO")).upper()

    return config


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []

    if config.database.url.startswith("sqlite"):
        warnings.append("Using SQLite - fine for development, use Postgres for multi-process deployments")

    if config.uploads.max_bytes <= 0:
        warnings.append("uploads.max_bytes must be positive - every avatar upload will be rejected")

    if not config.uploads.public_base_url:
        warnings.append("No public_base_url for avatars - stored avatar URLs will be relative to the site root")

    if not config.web.user_header:
        warnings.append("No identity header configured - every API request will be rejected")

    if config.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        warnings.append(f"Unknown log_level '{config.log_level}' - falling back to INFO")

    return warnings
