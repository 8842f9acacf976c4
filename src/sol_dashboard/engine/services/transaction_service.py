"""Transaction service — recording, status reconciliation, history queries.

Implements the ledger's transaction lifecycle:
1. Record — validate a client-submitted record, enrich it from chain data
   when it describes a native SOL transfer, persist it once
2. Reconcile — move a pending record to its terminal status
3. Query — a wallet's records, newest first, optionally filtered by type
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError

from sol_dashboard.config.settings import Cluster
from sol_dashboard.engine.models.transaction import Transaction, TxStatus, TxType
from sol_dashboard.errors.definitions import (
    ErrEmptyTokenChanges,
    ErrFieldTooLong,
    ErrInvalidFieldValue,
    ErrInvalidStatus,
    ErrInvalidTimestamp,
    ErrInvalidTokenChange,
    ErrInvalidTransactionType,
    ErrMissingSignature,
    ErrMissingWalletAddress,
    ErrStorageUnavailable,
    ErrTransactionDuplicate,
    ErrTransactionNotFound,
)
from sol_dashboard.swap.tokens import is_native_symbol

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sol_dashboard.engine.client import LedgerEngine

logger = logging.getLogger(__name__)

FILTER_ALL = "all"

_EXPLORER_URL = "https://explorer.solana.com/tx/{signature}"

# camelCase request keys mapped onto optional model columns
_OPTIONAL_FIELDS = {
    "from": "from_address",
    "to": "to_address",
    "value": "value",
    "fee": "fee",
    "priceImpact": "price_impact",
    "inputMint": "input_mint",
    "outputMint": "output_mint",
    "isRealTransaction": "is_real_transaction",
}
_NUMERIC_COLUMNS = ("value", "fee")
_BOOLEAN_COLUMNS = ("is_real_transaction",)
_REQUIRED_FIELDS = ("signature", "walletAddress", "type", "tokenChanges", "status", "timestamp")
# Derived server-side; a client-supplied value is discarded
_DERIVED_FIELDS = ("explorerUrl",)


def explorer_url(signature: str, cluster: Cluster) -> str:
    """Build the Solana Explorer link for *signature* on *cluster*."""
    url = _EXPLORER_URL.format(signature=signature)
    if cluster != Cluster.MAINNET_BETA:
        url += f"?cluster={cluster.value}"
    return url


@contextmanager
def _storage_errors() -> Iterator[None]:
    """Translate database connectivity failures into ``ErrStorageUnavailable``."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("Transaction store unavailable: %s", exc)
        raise ErrStorageUnavailable from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _column_length(column: str) -> int | None:
    return getattr(Transaction.__table__.c[column].type, "length", None)


def _check_length(column: str, value: str) -> None:
    limit = _column_length(column)
    if limit is not None and len(value) > limit:
        raise ErrFieldTooLong


def _validate_optional(column: str, value: Any) -> Any:
    if column in _NUMERIC_COLUMNS:
        if not _is_number(value):
            raise ErrInvalidFieldValue
    elif column in _BOOLEAN_COLUMNS:
        if not isinstance(value, bool):
            raise ErrInvalidFieldValue
    else:
        if not isinstance(value, str):
            raise ErrInvalidFieldValue
        _check_length(column, value)
    return value


def _validate_token_changes(changes: Any) -> list[dict[str, Any]]:
    if not isinstance(changes, list):
        raise ErrInvalidTokenChange
    normalized: list[dict[str, Any]] = []
    for change in changes:
        if not isinstance(change, dict):
            raise ErrInvalidTokenChange
        amount = change.get("amount")
        symbol = change.get("tokenSymbol")
        if not _is_number(amount) or not isinstance(symbol, str) or not symbol:
            raise ErrInvalidTokenChange
        normalized.append({"amount": amount, "tokenSymbol": symbol})
    return normalized


def validate_candidate(candidate: dict[str, Any]) -> dict[str, Any]:
    """Check the required fields of a record candidate and normalise them.

    Returns:
        A dict of model column values for the required fields.

    Raises:
        LedgerError: With status 400 describing the first invalid field.
    """
    signature = candidate.get("signature")
    if not isinstance(signature, str) or not signature.strip():
        raise ErrMissingSignature

    wallet = candidate.get("walletAddress")
    if not isinstance(wallet, str) or not wallet.strip():
        raise ErrMissingWalletAddress

    try:
        tx_type = TxType(candidate.get("type"))
    except ValueError as exc:
        raise ErrInvalidTransactionType from exc

    try:
        status = TxStatus(candidate.get("status"))
    except ValueError as exc:
        raise ErrInvalidStatus from exc

    timestamp = candidate.get("timestamp")
    if not isinstance(timestamp, int) or isinstance(timestamp, bool) or timestamp < 0:
        raise ErrInvalidTimestamp

    token_changes = _validate_token_changes(candidate.get("tokenChanges"))
    if status == TxStatus.CONFIRMED and not token_changes:
        raise ErrEmptyTokenChanges

    signature = signature.strip()
    wallet = wallet.strip()
    _check_length("signature", signature)
    _check_length("wallet_address", wallet)

    return {
        "signature": signature,
        "wallet_address": wallet,
        "type": tx_type.value,
        "status": status.value,
        "timestamp": timestamp,
        "token_changes": token_changes,
    }


class TransactionService:
    """Business logic for the transaction ledger.

    - Recording (validate, enrich, persist once per signature)
    - Status reconciliation (pending → confirmed | failed)
    - History queries
    """

    def __init__(self, engine: LedgerEngine) -> None:
        self._engine = engine

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    async def record_transaction(self, candidate: dict[str, Any]) -> Transaction:
        """Persist a client-submitted transaction record.

        Args:
            candidate: camelCase record fields. Required: ``signature``,
                ``walletAddress``, ``type``, ``tokenChanges``, ``status``,
                ``timestamp``. Known optional fields map to columns; any
                other field is kept verbatim in ``metadata``.

        Returns:
            The persisted Transaction model.

        Raises:
            LedgerError: 400 on invalid input, 409 if the signature is
                already recorded, 503 if the store is unreachable.
        """
        fields = validate_candidate(candidate)
        optional = {
            column: _validate_optional(column, candidate[key])
            for key, column in _OPTIONAL_FIELDS.items()
            if candidate.get(key) is not None
        }
        passthrough = {
            key: value
            for key, value in candidate.items()
            if key not in _OPTIONAL_FIELDS
            and key not in _REQUIRED_FIELDS
            and key not in _DERIVED_FIELDS
        }

        metrics = self._engine.metrics
        if metrics is not None:
            with metrics.track_record_transaction():
                return await self._record(fields, optional, passthrough)
        return await self._record(fields, optional, passthrough)

    async def _record(
        self,
        fields: dict[str, Any],
        optional: dict[str, Any],
        passthrough: dict[str, Any],
    ) -> Transaction:
        signature = fields["signature"]

        # Fast path; the unique constraint still decides concurrent inserts.
        if await self.get_transaction(signature) is not None:
            raise ErrTransactionDuplicate

        if self._should_enrich(fields, optional):
            transfer = await self._engine.chain_reader.read_transfer(signature)
            # Chain values override client values; missing chain values never clear them.
            if transfer.from_address is not None:
                optional["from_address"] = transfer.from_address
            if transfer.to_address is not None:
                optional["to_address"] = transfer.to_address
            if transfer.value is not None:
                optional["value"] = transfer.value

        tx = Transaction(
            **fields,
            **optional,
            explorer_url=explorer_url(signature, self._engine.config.solana.cluster),
            metadata_=passthrough,
        )

        with _storage_errors():
            async with self._engine.datastore.session() as session:
                session.add(tx)
                try:
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    logger.info("Duplicate transaction record rejected: %s", signature[:16])
                    raise ErrTransactionDuplicate from exc
                except DataError as exc:
                    await session.rollback()
                    logger.info("Transaction record rejected by the store: %s", exc.orig)
                    raise ErrInvalidFieldValue from exc
                await session.refresh(tx)

        logger.info(
            "Recorded %s transaction %s for %s (%s)",
            tx.type,
            signature[:16],
            tx.wallet_address[:8],
            tx.status,
        )
        return tx

    def _should_enrich(self, fields: dict[str, Any], optional: dict[str, Any]) -> bool:
        """Only native SOL transfers that were actually submitted are looked up."""
        if not self._engine.config.solana.enrich_transfers:
            return False
        if fields["type"] != TxType.TRANSFER:
            return False
        if optional.get("is_real_transaction") is False:
            return False
        changes = fields["token_changes"]
        return bool(changes) and all(is_native_symbol(c["tokenSymbol"]) for c in changes)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    async def update_transaction_status(self, signature: str, status: str) -> Transaction:
        """Apply a status transition to a recorded transaction.

        Terminal records (``confirmed``/``failed``) are returned unchanged:
        repeated or late confirmations are accepted as no-ops.

        Args:
            signature: The recorded signature.
            status: Target status.

        Returns:
            The (possibly unchanged) Transaction.

        Raises:
            LedgerError: 400 for an unknown status or a confirmation without
                token changes, 404 if the signature is unknown, 503 if the
                store is unreachable.
        """
        try:
            target = TxStatus(status)
        except ValueError as exc:
            raise ErrInvalidStatus from exc

        metrics = self._engine.metrics
        if metrics is not None:
            with metrics.track_reconcile_transaction():
                return await self._reconcile(signature, target)
        return await self._reconcile(signature, target)

    async def _reconcile(self, signature: str, target: TxStatus) -> Transaction:
        with _storage_errors():
            async with self._engine.datastore.session() as session:
                result = await session.execute(
                    select(Transaction).where(Transaction.signature == signature).with_for_update()
                )
                tx = result.scalar_one_or_none()
                if tx is None:
                    raise ErrTransactionNotFound

                current = tx.tx_status
                if current.is_terminal or current == target:
                    logger.debug(
                        "Ignoring %s -> %s for %s", current.value, target.value, signature[:16]
                    )
                    return tx

                if target == TxStatus.CONFIRMED and not tx.token_changes:
                    raise ErrEmptyTokenChanges

                tx.status = target.value
                await session.commit()
                await session.refresh(tx)

        logger.info("Transaction %s -> %s", signature[:16], target.value)
        return tx

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_transaction(self, signature: str) -> Transaction | None:
        """Get a transaction by signature.

        Returns:
            The Transaction model, or None.
        """
        with _storage_errors():
            async with self._engine.datastore.session() as session:
                result = await session.execute(
                    select(Transaction).where(Transaction.signature == signature)
                )
                return result.scalar_one_or_none()

    async def get_transactions(
        self,
        wallet_address: str,
        *,
        filter_type: str = FILTER_ALL,
    ) -> list[Transaction]:
        """Get a wallet's transactions, most recent first.

        Ties on ``timestamp`` list the later-inserted record first. The type
        filter is applied after retrieval; an unknown wallet or a filter
        matching nothing yields an empty list.

        Args:
            wallet_address: The wallet public key.
            filter_type: ``all`` or a transaction type.
        """
        stmt = (
            select(Transaction)
            .where(Transaction.wallet_address == wallet_address)
            .order_by(Transaction.timestamp.desc(), Transaction.id.desc())
        )

        metrics = self._engine.metrics
        with _storage_errors():
            async with self._engine.datastore.session() as session:
                if metrics is not None:
                    with metrics.track_query_transaction():
                        result = await session.execute(stmt)
                else:
                    result = await session.execute(stmt)
                txs = list(result.scalars().all())

        if filter_type and filter_type != FILTER_ALL:
            txs = [tx for tx in txs if tx.type == filter_type]
        return txs

    async def get_pending_transactions(self, *, limit: int = 100) -> list[Transaction]:
        """Get the oldest records still awaiting a terminal status."""
        stmt = (
            select(Transaction)
            .where(Transaction.status == TxStatus.PENDING.value)
            .order_by(Transaction.timestamp.asc(), Transaction.id.asc())
            .limit(limit)
        )
        with _storage_errors():
            async with self._engine.datastore.session() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
