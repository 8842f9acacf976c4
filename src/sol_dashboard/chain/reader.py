"""Chain reader — best-effort lookup of authoritative transfer details.

Every lookup degrades to an empty result instead of raising: a missing,
unparseable or unreachable transaction never blocks a ledger write.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sol_dashboard.chain.rpc.models import ConfirmedTransaction, lamports_to_sol
from sol_dashboard.engine.models.transaction import TxStatus
from sol_dashboard.errors.chain_errors import RPCError

if TYPE_CHECKING:
    from sol_dashboard.chain.rpc.client import SolanaRPCClient
    from sol_dashboard.metrics.collector import EngineMetrics

logger = logging.getLogger(__name__)

_FINAL_CONFIRMATION_STATUSES = ("confirmed", "finalized")


@dataclass(frozen=True)
class ChainTransfer:
    """Sender, receiver and SOL value moved by a transaction."""

    from_address: str | None = None
    to_address: str | None = None
    value: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.from_address is None and self.to_address is None and self.value is None


EMPTY_TRANSFER = ChainTransfer()


def detect_transfer(tx: ConfirmedTransaction) -> ChainTransfer:
    """Derive from/to/value from the pre- and post-execution balances.

    The first account whose balance decreased is the sender; the first whose
    balance increased is the receiver, and its increase is the value. Later
    balance changes are ignored, so transactions touching more than two
    accounts get a simplified attribution.
    """
    from_address: str | None = None
    to_address: str | None = None
    value: float | None = None

    pairs = zip(tx.pre_balances, tx.post_balances, strict=False)
    for index, (pre, post) in enumerate(pairs):
        if index >= len(tx.account_keys):
            break
        if from_address is None and post < pre:
            from_address = tx.account_keys[index]
        elif to_address is None and post > pre:
            to_address = tx.account_keys[index]
            value = lamports_to_sol(post - pre)
        if from_address is not None and to_address is not None:
            break

    return ChainTransfer(from_address=from_address, to_address=to_address, value=value)


class ChainReader:
    """Reads transfer details and confirmation status from the chain.

    Args:
        rpc: Connected Solana RPC client.
        timeout: Upper bound in seconds for a single lookup.
        metrics: Optional metrics sink for enrichment outcomes.
    """

    def __init__(
        self,
        rpc: SolanaRPCClient,
        *,
        timeout: float = 5.0,
        metrics: EngineMetrics | None = None,
    ) -> None:
        self._rpc = rpc
        self._timeout = timeout
        self._metrics = metrics

    async def read_transfer(self, signature: str) -> ChainTransfer:
        """Return the authoritative transfer for *signature*, or an empty result."""
        if not signature:
            return EMPTY_TRANSFER
        try:
            async with asyncio.timeout(self._timeout):
                tx = await self._rpc.get_transaction(signature)
        except TimeoutError:
            logger.warning("Chain lookup timed out for %s", signature[:16])
            self._observe("timeout")
            return EMPTY_TRANSFER
        except (RPCError, AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Chain lookup failed for %s: %s", signature[:16], exc)
            self._observe("error")
            return EMPTY_TRANSFER

        if tx is None:
            self._observe("not_found")
            return EMPTY_TRANSFER

        transfer = detect_transfer(tx)
        self._observe("empty" if transfer.is_empty else "enriched")
        return transfer

    async def read_status(self, signature: str) -> TxStatus | None:
        """Map the chain's view of *signature* to a record status.

        Returns:
            ``FAILED`` if the transaction errored, ``CONFIRMED`` once it
            reached confirmed/finalized commitment, ``PENDING`` while it is
            only processed, and None if unknown or unreachable.
        """
        try:
            async with asyncio.timeout(self._timeout):
                statuses = await self._rpc.get_signature_statuses([signature])
        except TimeoutError:
            logger.warning("Status lookup timed out for %s", signature[:16])
            return None
        except (RPCError, AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Status lookup failed for %s: %s", signature[:16], exc)
            return None

        status = statuses[0] if statuses else None
        if status is None:
            return None
        if status.err is not None:
            return TxStatus.FAILED
        if status.confirmation_status in _FINAL_CONFIRMATION_STATUSES:
            return TxStatus.CONFIRMED
        return TxStatus.PENDING

    def _observe(self, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_enrichment(outcome)
