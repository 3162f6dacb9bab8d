"""Application configuration utilities for the expense tracker backend.

Every runtime knob of the expense tracker is read from the environment here,
once, into an immutable :class:`AppConfig`.  The logging setup lives here as
well since the log level is one of those knobs.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Values from a local .env file never override the real environment.
load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
)

_handler: Optional[logging.Handler] = None


@dataclass(frozen=True)
class AppConfig:
    """Settings shared by the API, the services and the repository.

    Attributes:
        project_root: Checkout directory; the default database lives here.
        database_file: Path to the SQLite database holding every user's
            expenses and settings. ``":memory:"`` keeps everything in RAM.
        default_currency: Working currency assumed for rows that carry no
            explicit currency (uploaded statements, legacy entries).
        cors_origins: Browser origins allowed to call the API.
        max_upload_bytes: Upper bound for a single uploaded CSV statement.
        log_level: Name of the root log level, e.g. ``"INFO"``.
        gemini_api_key: Optional API key for the finance tips chatbot.
        gemini_endpoint: ``generateContent`` URL of the chatbot model.
    """

    project_root: Path
    database_file: str
    default_currency: str
    cors_origins: tuple[str, ...]
    max_upload_bytes: int
    log_level: str
    gemini_api_key: Optional[str]
    gemini_endpoint: str


def load_config() -> AppConfig:
    """Build an :class:`AppConfig` from ``EXPENSE_TRACKER_*`` and ``GEMINI_*`` variables."""

    project_root = Path(__file__).resolve().parent.parent
    database_file = getenv_with_default(
        "EXPENSE_TRACKER_DB_FILE",
        project_root / "expense_tracker.db",
    )
    default_currency = getenv_with_default("EXPENSE_TRACKER_DEFAULT_CURRENCY", "INR")
    max_upload_bytes = int(
        getenv_with_default("EXPENSE_TRACKER_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))
    )
    log_level = getenv_with_default("EXPENSE_TRACKER_LOG_LEVEL", "INFO")
    gemini_api_key = getenv_with_default("GEMINI_API_KEY")
    gemini_endpoint = getenv_with_default(
        "GEMINI_ENDPOINT",
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-1.5-flash-latest:generateContent",
    )

    # Ensure the directory exists so sqlite can create the file on first use.
    if database_file != ":memory:":
        Path(database_file).parent.mkdir(parents=True, exist_ok=True)

    return AppConfig(
        project_root=project_root,
        database_file=database_file,
        default_currency=default_currency.strip().upper(),
        cors_origins=load_cors_origins(),
        max_upload_bytes=max_upload_bytes,
        log_level=log_level.upper(),
        gemini_api_key=gemini_api_key,
        gemini_endpoint=gemini_endpoint,
    )


def load_cors_origins() -> tuple[str, ...]:
    """Comma-separated ``EXPENSE_TRACKER_CORS_ORIGINS`` or the local dev origins."""

    origins = getenv_with_default("EXPENSE_TRACKER_CORS_ORIGINS")
    if not origins:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in origins.split(",") if origin.strip())


def getenv_with_default(name: str, default: Optional[Path | str] = None) -> Optional[str]:
    """Read ``name`` from the environment, falling back to ``default`` as a string."""

    value = os.environ.get(name)
    if value is not None:
        return value
    if default is None:
        return None
    return str(default)


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger.

    Calling the function twice replaces the previous handler instead of
    duplicating every log line.
    """

    log_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    global _handler
    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)
    _handler = handler
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
