"""Shared test fixtures for the sol-dashboard test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sol_dashboard.chain.reader import EMPTY_TRANSFER
from sol_dashboard.config.settings import DatabaseEngine

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sol_dashboard.chain.reader import ChainTransfer
    from sol_dashboard.engine.client import LedgerEngine
    from sol_dashboard.engine.models.transaction import TxStatus


class FakeChainReader:
    """Stands in for ChainReader; records every lookup it serves."""

    def __init__(self) -> None:
        self.transfer: ChainTransfer = EMPTY_TRANSFER
        self.statuses: dict[str, TxStatus | None] = {}
        self.transfer_calls: list[str] = []
        self.status_calls: list[str] = []

    async def read_transfer(self, signature: str) -> ChainTransfer:
        self.transfer_calls.append(signature)
        return self.transfer

    async def read_status(self, signature: str) -> TxStatus | None:
        self.status_calls.append(signature)
        return self.statuses.get(signature)


@pytest.fixture
def app_config():
    """Provide a test AppConfig with safe defaults."""
    from sol_dashboard.config.settings import AppConfig, DatabaseConfig, TaskConfig

    return AppConfig(
        debug=True,
        db=DatabaseConfig(
            engine=DatabaseEngine.SQLITE,
            dsn="sqlite+aiosqlite:///:memory:",
        ),
        task=TaskConfig(enabled=False),
    )


@pytest.fixture
def chain_reader() -> FakeChainReader:
    return FakeChainReader()


@pytest.fixture
async def engine(app_config, chain_reader) -> AsyncIterator[LedgerEngine]:
    """An initialized engine on in-memory SQLite with a fake chain reader."""
    from sol_dashboard.engine.client import LedgerEngine

    eng = LedgerEngine(app_config)
    await eng.initialize()
    eng._chain_reader = chain_reader
    yield eng
    await eng.close()


@pytest.fixture
def test_client(app_config):
    """Provide a FastAPI TestClient with the app wired to test config."""
    from fastapi.testclient import TestClient

    from sol_dashboard.api.app import create_app

    app = create_app(config=app_config)
    return TestClient(app, raise_server_exceptions=False)
