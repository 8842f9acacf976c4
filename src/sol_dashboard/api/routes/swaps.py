"""Swap endpoints: quote and execute through the configured provider."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends

from sol_dashboard.api.dependencies import get_engine
from sol_dashboard.api.routes.transactions import tx_response
from sol_dashboard.api.schemas import (
    SwapExecuteRequest,
    SwapExecuteResponse,
    SwapQuoteRequest,
    SwapQuoteResponse,
)
from sol_dashboard.engine.client import LedgerEngine  # noqa: TC001
from sol_dashboard.swap.tokens import get_token

if TYPE_CHECKING:
    from sol_dashboard.swap.base import SwapQuote

router = APIRouter(prefix="/swap", tags=["swap"])


def _quote_response(q: SwapQuote) -> SwapQuoteResponse:
    return SwapQuoteResponse(
        provider=q.provider,
        input_mint=q.input_token.mint,
        output_mint=q.output_token.mint,
        input_amount=q.input_ui_amount,
        output_amount=q.output_ui_amount,
        min_output_amount=q.output_token.to_ui(q.min_output_amount),
        exchange_rate=q.exchange_rate,
        price_impact=q.price_impact,
        slippage_bps=q.slippage_bps,
        token_changes=q.token_changes(),
    )


async def _quote(engine: LedgerEngine, body: SwapQuoteRequest) -> SwapQuote:
    amount = get_token(body.input_mint).to_base(body.amount)
    return await engine.swap_provider.get_quote(
        body.input_mint,
        body.output_mint,
        amount,
        slippage_bps=body.slippage_bps,
    )


@router.post("/quote")
async def get_quote(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    body: SwapQuoteRequest,
) -> dict:
    """Price a swap without executing it."""
    quote = await _quote(engine, body)
    return _quote_response(quote).model_dump(mode="json", by_alias=True)


@router.post("/execute")
async def execute_swap(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    body: SwapExecuteRequest,
) -> dict:
    """Quote and execute a swap.

    A simulated swap is recorded right away. A real swap returns unsigned
    transactions; the wallet records it after signing and submitting.
    """
    quote = await _quote(engine, body)
    execution = await engine.swap_provider.execute_swap(quote, body.user_public_key)

    record = None
    if not execution.is_real_transaction:
        candidate = execution.record_candidate(body.user_public_key, timestamp=int(time.time()))
        tx = await engine.transaction_service.record_transaction(candidate)
        record = tx_response(tx)

    response = SwapExecuteResponse(
        provider=execution.provider,
        quote=_quote_response(quote),
        is_real_transaction=execution.is_real_transaction,
        signature=execution.signature,
        transactions=execution.transactions,
        last_valid_block_height=execution.last_valid_block_height,
        transaction=record,
    )
    return response.model_dump(mode="json", by_alias=True, exclude_none=True)
