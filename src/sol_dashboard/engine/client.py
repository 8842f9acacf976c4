"""LedgerEngine — central engine client owning all services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sol_dashboard.chain.reader import ChainReader
from sol_dashboard.chain.rpc.client import SolanaRPCClient
from sol_dashboard.datastore.client import Datastore
from sol_dashboard.datastore.migrations import run_auto_migrate
from sol_dashboard.engine.services.transaction_service import TransactionService
from sol_dashboard.metrics.collector import EngineMetrics
from sol_dashboard.swap import create_swap_provider

if TYPE_CHECKING:
    from sol_dashboard.config.settings import AppConfig
    from sol_dashboard.swap.base import SwapProvider
    from sol_dashboard.taskmanager.manager import TaskManager

logger = logging.getLogger(__name__)

# Error messages
_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class LedgerEngine:
    """Central engine that owns the datastore, chain access and services.

    Route handlers and background jobs receive the engine explicitly; there
    is no process-wide client.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        rpc: SolanaRPCClient | None = None,
        swap_provider: SwapProvider | None = None,
        metrics: EngineMetrics | None = None,
    ) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration.
            rpc: Pre-built RPC client; one is created from ``config.solana``
                when omitted.
            swap_provider: Pre-built swap backend; selected by
                ``config.swap.provider`` when omitted.
            metrics: Shared metrics sink; created when metrics are enabled
                and none is given.
        """
        self._config = config
        self._initialized = False

        # Infrastructure components
        self._datastore: Datastore | None = None
        self._rpc: SolanaRPCClient | None = rpc
        self._chain_reader: ChainReader | None = None
        self._swap: SwapProvider | None = swap_provider

        # Services
        self._transaction_service: TransactionService | None = None
        self._task_manager: TaskManager | None = None
        self._metrics: EngineMetrics | None = metrics

    async def initialize(self) -> None:
        """Open the datastore, connect chain clients and start background jobs.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        try:
            await self._start()
        except Exception:
            await self.close()
            raise

        self._initialized = True
        logger.info(
            "Ledger engine initialized (cluster=%s, swap=%s)",
            self._config.solana.cluster.value,
            self.swap_provider.name,
        )

    async def _start(self) -> None:
        self._datastore = Datastore(self._config.db)
        await self._datastore.open()
        await run_auto_migrate(self._datastore.engine)

        if self._metrics is None and self._config.metrics.enabled:
            self._metrics = EngineMetrics()

        if self._rpc is None:
            self._rpc = SolanaRPCClient(self._config.solana)
        if not self._rpc.is_connected:
            await self._rpc.connect()
        self._chain_reader = ChainReader(
            self._rpc,
            timeout=self._config.solana.enrichment_timeout,
            metrics=self._metrics,
        )

        if self._swap is None:
            self._swap = create_swap_provider(self._config.swap)
        await self._swap.connect()

        self._transaction_service = TransactionService(self)

        # Initialize task manager and register cron jobs
        from functools import partial

        from sol_dashboard.taskmanager.manager import CronJob, TaskManager
        from sol_dashboard.taskmanager.tasks import task_reconcile_pending_transactions

        if self._config.task.enabled:
            self._task_manager = TaskManager(metrics=self._metrics)
            self._task_manager.register(
                "reconcile_pending_transactions",
                CronJob(
                    handler=partial(task_reconcile_pending_transactions, self),
                    period=self._config.task.reconcile_period,
                ),
            )
            await self._task_manager.start()

    async def close(self) -> None:
        """Gracefully shut down all services and connections.

        Releases whatever was opened, including after a failed
        ``initialize()``. Can be called multiple times (idempotent).
        """
        # Stop task manager first (depends on services)
        if self._task_manager is not None:
            await self._task_manager.stop()
            self._task_manager = None

        self._transaction_service = None
        self._chain_reader = None
        self._metrics = None

        if self._swap is not None:
            await self._swap.close()

        if self._rpc is not None:
            await self._rpc.close()

        if self._datastore is not None:
            await self._datastore.close()
            self._datastore = None

        if self._initialized:
            logger.info("Ledger engine closed")
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        """Get the application configuration."""
        return self._config

    @property
    def datastore(self) -> Datastore:
        """Get the datastore instance.

        Raises:
            RuntimeError: If engine not initialized.
        """
        if self._datastore is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._datastore

    @property
    def rpc(self) -> SolanaRPCClient:
        """Get the Solana RPC client."""
        if self._rpc is None or not self._rpc.is_connected:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._rpc

    @property
    def chain_reader(self) -> ChainReader:
        """Get the chain reader used for enrichment and status lookups."""
        if self._chain_reader is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._chain_reader

    @property
    def swap_provider(self) -> SwapProvider:
        """Get the configured swap backend."""
        if self._swap is None or not self._initialized:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._swap

    @property
    def transaction_service(self) -> TransactionService:
        """Get the transaction service."""
        if self._transaction_service is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._transaction_service

    @property
    def metrics(self) -> EngineMetrics | None:
        """Get the engine metrics (None if disabled or not initialized)."""
        return self._metrics

    @property
    def task_manager(self) -> TaskManager | None:
        """Get the task manager (None if not enabled)."""
        return self._task_manager

    async def health_check(self) -> dict[str, str]:
        """Check health status of all engine components.

        Returns:
            Dictionary with component statuses ('ok', 'error', 'not_initialized').
        """
        status = {
            "engine": "ok" if self._initialized else "not_initialized",
            "datastore": "unknown",
            "chain": "unknown",
        }

        if self._initialized:
            if self._datastore and self._datastore.is_open:
                status["datastore"] = "ok"
            else:
                status["datastore"] = "error"

            if self._rpc and self._rpc.is_connected:
                status["chain"] = "ok"
            else:
                status["chain"] = "not_connected"

        return status
