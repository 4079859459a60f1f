"""Environment-sourced runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


DEFAULT_SQLITE_URL = "sqlite:///unicatalog.db"
DEFAULT_SOURCE_URL = "http://universities.hipolabs.com/search"

_POSTGRES_VARS = (
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
)


@dataclass(frozen=True)
class CatalogSettings:
    database_url: str
    sql_echo: bool
    log_level: str
    source_url: str
    import_timeout_seconds: float


def _normalize_bool(value: str | None, default: bool = False) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _get_database_url() -> str:
    """Resolve the store URL.

    DATABASE_URL wins. Otherwise a PostgreSQL URL is assembled from the
    POSTGRES_* components when all of them are present; a partial set is a
    configuration error. With none of them set the local SQLite file is used.
    """
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    values = {name: os.getenv(name) for name in _POSTGRES_VARS}
    if not any(values.values()):
        return DEFAULT_SQLITE_URL

    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return (
        f"postgresql://{values['POSTGRES_USER']}:{values['POSTGRES_PASSWORD']}"
        f"@{values['POSTGRES_HOST']}:{values['POSTGRES_PORT']}/{values['POSTGRES_DB']}"
    )


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache(maxsize=None)
def get_settings() -> CatalogSettings:
    """Return the cached settings sourced from the environment."""
    return CatalogSettings(
        database_url=_get_database_url(),
        sql_echo=_normalize_bool(os.getenv("UNICATALOG_SQL_ECHO")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        source_url=os.getenv("UNIVERSITIES_SOURCE_URL", DEFAULT_SOURCE_URL),
        import_timeout_seconds=_get_float("IMPORT_TIMEOUT_SECONDS", 30.0),
    )


def resolve_database_url(override: Optional[str] = None) -> str:
    """Prefer an explicit URL (e.g. a CLI flag) over the environment."""
    return override or get_settings().database_url


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
