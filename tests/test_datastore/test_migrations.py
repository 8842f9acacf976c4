"""Tests for auto-migration support — datastore/migrations.py."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sol_dashboard.datastore.migrations import drop_all_tables, run_auto_migrate
from sol_dashboard.engine.models.transaction import Transaction


def _tx(signature: str) -> Transaction:
    return Transaction(
        signature=signature,
        wallet_address="wallet",
        type="swap",
        token_changes=[{"amount": 1.0, "tokenSymbol": "USDC"}],
        status="confirmed",
        timestamp=10,
        explorer_url="",
    )


class TestAutoMigrate:
    async def test_creates_transactions_table_and_index(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        await run_auto_migrate(engine)

        async with engine.connect() as conn:
            tables = await conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
            indexes = await conn.execute(text("SELECT name FROM sqlite_master WHERE type='index'"))
            assert "transactions" in {row[0] for row in tables.fetchall()}
            assert "ix_transactions_wallet_timestamp" in {row[0] for row in indexes.fetchall()}
        await engine.dispose()

    async def test_idempotent(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        await run_auto_migrate(engine)
        await run_auto_migrate(engine)
        await engine.dispose()

    async def test_drop_all_tables(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        await run_auto_migrate(engine)
        await drop_all_tables(engine)

        async with engine.connect() as conn:
            result = await conn.execute(
                text(
                    "SELECT count(*) FROM sqlite_master "
                    "WHERE type='table' AND name != 'sqlite_sequence'"
                )
            )
            assert result.scalar() == 0
        await engine.dispose()

    async def test_signature_is_unique(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        await run_auto_migrate(engine)

        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with factory() as session:
            session.add(_tx("dup"))
            await session.commit()
        async with factory() as session:
            session.add(_tx("dup"))
            with pytest.raises(IntegrityError):
                await session.commit()

        await engine.dispose()
