"""Configuration module — frozen dataclass loaded from environment variables."""

import os
from dataclasses import dataclass

from daily_error_log.context import CANONICAL_LOCALE


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _optional(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _parse_depth(value: str) -> int:
    """Positive nesting cap; anything unparsable or below 1 falls back to 1."""
    try:
        depth = int(value.strip())
    except ValueError:
        return Config.max_depth
    return depth if depth >= 1 else Config.max_depth


@dataclass(frozen=True)
class Config:
    log_dir: str | None = None          # explicit log directory, wins over content_dir
    content_dir: str | None = None      # data root; logs go to <content_dir>/logs
    canonical_locale: str = CANONICAL_LOCALE
    languages_dir: str | None = None
    package_languages_dir: str | None = None
    capture_warnings: bool = True
    capture_exceptions: bool = True
    capture_shutdown: bool = True
    capture_all: bool = True            # show every warning category, as warnings "default" does
    max_depth: int = 1


def load_config() -> Config:
    """Build Config from environment variables with sensible defaults."""
    return Config(
        log_dir=_optional("ERRLOG_LOG_DIR"),
        content_dir=_optional("ERRLOG_CONTENT_DIR"),
        canonical_locale=os.environ.get("ERRLOG_CANONICAL_LOCALE", Config.canonical_locale),
        languages_dir=_optional("ERRLOG_LANGUAGES_DIR"),
        package_languages_dir=_optional("ERRLOG_PACKAGE_LANGUAGES_DIR"),
        capture_warnings=_parse_bool(os.environ.get("ERRLOG_CAPTURE_WARNINGS", "true")),
        capture_exceptions=_parse_bool(os.environ.get("ERRLOG_CAPTURE_EXCEPTIONS", "true")),
        capture_shutdown=_parse_bool(os.environ.get("ERRLOG_CAPTURE_SHUTDOWN", "true")),
        capture_all=_parse_bool(os.environ.get("ERRLOG_CAPTURE_ALL", "true")),
        max_depth=_parse_depth(os.environ.get("ERRLOG_MAX_DEPTH", str(Config.max_depth))),
    )
