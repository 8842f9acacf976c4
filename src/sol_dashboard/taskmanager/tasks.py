"""Background task definitions — cron job handlers.

- ``reconcile_pending_transactions`` — ask the chain about every record still
  ``pending`` and apply the terminal status it reports
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sol_dashboard.engine.models.transaction import TxStatus
from sol_dashboard.errors.ledger_errors import LedgerError

if TYPE_CHECKING:
    from sol_dashboard.engine.client import LedgerEngine

logger = logging.getLogger(__name__)


async def task_reconcile_pending_transactions(engine: LedgerEngine) -> int:
    """Settle pending records whose on-chain outcome is known.

    Records the chain has no knowledge of (including simulated swaps) stay
    pending and are retried on the next run.

    Returns:
        The number of records moved to a terminal status.
    """
    service = engine.transaction_service
    reader = engine.chain_reader
    pending = await service.get_pending_transactions(limit=engine.config.task.reconcile_batch_size)

    settled = 0
    for tx in pending:
        status = await reader.read_status(tx.signature)
        if status is None or status == TxStatus.PENDING:
            continue
        try:
            await service.update_transaction_status(tx.signature, status.value)
        except LedgerError as exc:
            logger.warning("Could not reconcile %s: %s", tx.signature[:16], exc.message)
            continue
        settled += 1

    if engine.metrics is not None:
        engine.metrics.set_pending_count(len(pending) - settled)
    if settled:
        logger.info("Reconciled %d of %d pending transactions", settled, len(pending))
    return settled
