"""Transaction endpoints: record, reconcile status, history, lookup."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from sol_dashboard.api.dependencies import get_engine
from sol_dashboard.api.schemas import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionStatusUpdate,
)
from sol_dashboard.engine.client import LedgerEngine  # noqa: TC001
from sol_dashboard.engine.services.transaction_service import FILTER_ALL
from sol_dashboard.errors.definitions import ErrTransactionNotFound

router = APIRouter(tags=["transaction"])


def tx_response(t: Any) -> dict[str, Any]:
    """Serialise a Transaction model to its camelCase JSON form."""
    return TransactionResponse(
        signature=t.signature,
        wallet_address=t.wallet_address,
        type=t.type,
        token_changes=t.token_changes,
        status=t.status,
        timestamp=t.timestamp,
        explorer_url=t.explorer_url,
        from_address=t.from_address,
        to_address=t.to_address,
        value=t.value,
        fee=t.fee,
        price_impact=t.price_impact,
        input_mint=t.input_mint,
        output_mint=t.output_mint,
        is_real_transaction=t.is_real_transaction,
        metadata=t.metadata_ or {},
        created_at=t.created_at,
        updated_at=t.updated_at,
    ).model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/transactions", status_code=201)
async def create_transaction(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    body: TransactionCreateRequest,
) -> dict:
    """Record a transaction the wallet has submitted."""
    candidate = body.model_dump(by_alias=True, exclude_none=True)
    tx = await engine.transaction_service.record_transaction(candidate)
    return tx_response(tx)


@router.patch("/transactions/{signature}")
async def update_transaction_status(
    signature: str,
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    body: TransactionStatusUpdate,
) -> dict:
    """Move a pending transaction to its final status."""
    tx = await engine.transaction_service.update_transaction_status(signature, body.status)
    return tx_response(tx)


@router.get("/transactions/signature/{signature}")
async def get_transaction(
    signature: str,
    engine: Annotated[LedgerEngine, Depends(get_engine)],
) -> dict:
    """Get a single transaction by signature."""
    tx = await engine.transaction_service.get_transaction(signature)
    if tx is None:
        raise ErrTransactionNotFound
    return tx_response(tx)


@router.get("/transactions/{wallet_address}")
async def list_transactions(
    wallet_address: str,
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    filter: Annotated[str, Query()] = FILTER_ALL,  # noqa: A002
) -> list[dict]:
    """List a wallet's transactions, most recent first."""
    txs = await engine.transaction_service.get_transactions(wallet_address, filter_type=filter)
    return [tx_response(t) for t in txs]
