"""Database engine factories — PostgreSQL, SQLite.

Provides async SQLAlchemy engine creation with support for:
- PostgreSQL (asyncpg driver)
- SQLite (aiosqlite driver)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from sol_dashboard.config.settings import DatabaseEngine

if TYPE_CHECKING:
    from sol_dashboard.config.settings import DatabaseConfig


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine from database configuration.

    Args:
        config: Database configuration with DSN, pool settings, etc.

    Returns:
        A configured ``AsyncEngine`` ready for use.
    """
    kwargs: dict[str, Any] = {
        "echo": config.debug_sql,
    }

    if config.engine == DatabaseEngine.SQLITE:
        # In-memory SQLite is per-connection; share one connection so every
        # session sees the same tables.
        if ":memory:" in config.dsn:
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = config.max_idle_connections
        kwargs["max_overflow"] = config.max_open_connections - config.max_idle_connections
        kwargs["pool_pre_ping"] = True

    return create_async_engine(config.dsn, **kwargs)
