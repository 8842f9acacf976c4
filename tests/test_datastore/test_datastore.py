"""Tests for datastore abstraction — client lifecycle and sessions."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from sol_dashboard.config.settings import DatabaseConfig
from sol_dashboard.datastore.client import Datastore
from sol_dashboard.engine.models.base import Base
from sol_dashboard.engine.models.transaction import Transaction


def _memory_config() -> DatabaseConfig:
    return DatabaseConfig(engine="sqlite", dsn="sqlite+aiosqlite:///:memory:")


class TestDatastore:
    """Test Datastore lifecycle and session management."""

    async def test_open_close(self) -> None:
        ds = Datastore(_memory_config())
        assert not ds.is_open
        await ds.open()
        assert ds.is_open
        await ds.close()
        assert not ds.is_open

    async def test_engine_property_when_closed(self) -> None:
        ds = Datastore(_memory_config())
        with pytest.raises(RuntimeError, match="not open"):
            _ = ds.engine

    async def test_session_when_closed(self) -> None:
        ds = Datastore(_memory_config())
        with pytest.raises(RuntimeError, match="not open"):
            ds.session()

    async def test_open_creates_tables(self) -> None:
        import sol_dashboard.engine.models  # noqa: F401

        ds = Datastore(_memory_config())
        await ds.open(base=Base)
        async with ds.session() as session:
            result = await session.execute(
                text("SELECT name FROM sqlite_master WHERE type='table'")
            )
            assert "transactions" in {row[0] for row in result.fetchall()}
        await ds.close()

    async def test_sessions_share_memory_database(self) -> None:
        ds = Datastore(_memory_config())
        await ds.open(base=Base)
        async with ds.session() as session:
            session.add(
                Transaction(
                    signature="sig",
                    wallet_address="wallet",
                    type="transfer",
                    token_changes=[],
                    status="pending",
                    timestamp=1,
                    explorer_url="",
                )
            )
            await session.commit()
        async with ds.session() as session:
            count = await session.execute(text("SELECT count(*) FROM transactions"))
            assert count.scalar() == 1
        await ds.close()

    async def test_close_idempotent(self) -> None:
        ds = Datastore(_memory_config())
        await ds.open()
        await ds.close()
        await ds.close()
