"""Configuration for the sidequest engine and its hosting layer."""

import logging
import os
from pathlib import Path

# Environment configuration
SIDEQUESTS_ENV = os.getenv("SIDEQUESTS_ENV", "development")
SIDEQUESTS_DATA_DIR = os.getenv("SIDEQUESTS_DATA_DIR", None)
SIDEQUESTS_ASSET_BASE_URL = os.getenv("SIDEQUESTS_ASSET_BASE_URL", "/sidequests")
SIDEQUESTS_LOG_LEVEL = os.getenv("SIDEQUESTS_LOG_LEVEL", "INFO")
SIDEQUESTS_HOST = os.getenv("SIDEQUESTS_HOST", "127.0.0.1")
SIDEQUESTS_PORT = int(os.getenv("SIDEQUESTS_PORT", "8000"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Below this many seconds on a session clock the UI shows a warning color
LOW_TIME_WARNING_SECONDS = 10

# Leaderboard
LEADERBOARD_DEFAULT_LIMIT = 10
LEADERBOARD_MAX_LIMIT = 100

# Hosted sessions older than this (and finished) are swept
STALE_SESSION_SECONDS = 3600

# Play-through results kept per hosted game (oldest dropped first)
MAX_HOSTED_RESULTS = 20

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def data_dir() -> Path:
    """Directory for the JSON file store (content pools, leaderboards)."""
    if SIDEQUESTS_DATA_DIR:
        return Path(SIDEQUESTS_DATA_DIR)
    return Path.home() / ".heinous" / "sidequests"


def configure_logging(level: str | None = None):
    """Configure root logging once for the CLI and the API server."""
    logging.basicConfig(
        level=getattr(logging, (level or SIDEQUESTS_LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
