"""
Runtime Configuration for the Persistence Layer

Reads database and logging settings from environment variables.

Environment variables:
- DATABASE_URL: SQLAlchemy async URL (default: local SQLite via aiosqlite)
- DATABASE_ECHO: 'true' / '1' / 'yes' to echo emitted SQL
- LOG_LEVEL: Root log level name (default: INFO)
"""
import os
import logging
from pathlib import Path

from exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///~/.local/share/assessment-store/assessments.db"
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in ('true', '1', 'yes')


def expand_sqlite_path(url: str) -> str:
    """
    Expand ~ in SQLite URLs and ensure the parent directory exists.

    In-memory URLs and non-SQLite URLs are returned unchanged.

    Args:
        url: Database URL (e.g. sqlite+aiosqlite:///~/data/app.db)

    Returns:
        URL with an absolute database path
    """
    if not url.startswith("sqlite") or "///" not in url:
        return url

    prefix_end = url.index("///") + 3
    prefix = url[:prefix_end]
    path = url[prefix_end:]

    if not path or path == ":memory:":
        return url

    abs_path = Path(os.path.expanduser(path)).resolve()
    abs_path.parent.mkdir(parents=True, exist_ok=True)

    return f"{prefix}{abs_path}"


def get_database_url() -> str:
    """
    Get the database URL for the async engine.

    Returns:
        SQLAlchemy URL string with SQLite paths expanded

    Raises:
        ConfigurationError: If DATABASE_URL is set but empty
    """
    url = os.environ.get('DATABASE_URL', DEFAULT_DATABASE_URL)
    if not url.strip():
        raise ConfigurationError("DATABASE_URL is set but empty", missing_keys=['DATABASE_URL'])
    return expand_sqlite_path(url.strip())


def is_echo_enabled() -> bool:
    """Check whether SQL statements should be echoed to the log."""
    return _is_truthy(os.environ.get('DATABASE_ECHO', 'false'))


def get_log_level() -> int:
    """
    Get the configured root log level.

    Returns:
        Numeric logging level

    Raises:
        ConfigurationError: If LOG_LEVEL is not a known level name
    """
    level_name = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()
    if level_name not in VALID_LOG_LEVELS:
        raise ConfigurationError(f"Invalid LOG_LEVEL: {level_name}")
    return getattr(logging, level_name)
