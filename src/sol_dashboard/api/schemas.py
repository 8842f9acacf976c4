"""API request/response Pydantic schemas.

These are the *API-layer* schemas that define the camelCase HTTP contract.
They deliberately do NOT inherit from SQLAlchemy models; the endpoint code
maps between ORM objects and these schemas.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Standard error body."""

    error: str
    code: str


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class TokenChange(_CamelModel):
    """A signed balance delta of one token."""

    amount: float
    token_symbol: str = Field(alias="tokenSymbol")


class TransactionCreateRequest(_CamelModel):
    """POST /api/transactions — record a submitted transaction.

    Fields beyond the known ones are accepted and stored as metadata.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    signature: str
    wallet_address: str = Field(alias="walletAddress")
    type: str
    token_changes: list[TokenChange] = Field(alias="tokenChanges")
    status: str
    timestamp: int
    from_address: str | None = Field(None, alias="from")
    to_address: str | None = Field(None, alias="to")
    value: float | None = None
    fee: float | None = None
    price_impact: str | None = Field(None, alias="priceImpact")
    input_mint: str | None = Field(None, alias="inputMint")
    output_mint: str | None = Field(None, alias="outputMint")
    is_real_transaction: bool | None = Field(None, alias="isRealTransaction")


class TransactionStatusUpdate(BaseModel):
    """PATCH /api/transactions/{signature}."""

    status: str


class TransactionResponse(_CamelModel):
    """Serialised transaction record."""

    signature: str
    wallet_address: str = Field(alias="walletAddress")
    type: str
    token_changes: list[TokenChange] = Field(alias="tokenChanges")
    status: str
    timestamp: int
    explorer_url: str = Field(alias="explorerUrl")
    from_address: str | None = Field(None, alias="from")
    to_address: str | None = Field(None, alias="to")
    value: float | None = None
    fee: float | None = None
    price_impact: str | None = Field(None, alias="priceImpact")
    input_mint: str | None = Field(None, alias="inputMint")
    output_mint: str | None = Field(None, alias="outputMint")
    is_real_transaction: bool | None = Field(None, alias="isRealTransaction")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")


# ---------------------------------------------------------------------------
# Wallets
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    """Native SOL and USDC balances of a wallet, in display units."""

    sol: float
    usdc: float


# ---------------------------------------------------------------------------
# Swaps
# ---------------------------------------------------------------------------


class SwapQuoteRequest(_CamelModel):
    """POST /api/swap/quote — amount is in display units of the input token."""

    input_mint: str = Field(alias="inputMint")
    output_mint: str = Field(alias="outputMint")
    amount: float = Field(gt=0)
    slippage_bps: int | None = Field(None, alias="slippageBps", ge=0, le=10_000)


class SwapExecuteRequest(SwapQuoteRequest):
    """POST /api/swap/execute."""

    user_public_key: str = Field(alias="userPublicKey", min_length=1)


class SwapQuoteResponse(_CamelModel):
    provider: str
    input_mint: str = Field(alias="inputMint")
    output_mint: str = Field(alias="outputMint")
    input_amount: float = Field(alias="inputAmount")
    output_amount: float = Field(alias="outputAmount")
    min_output_amount: float = Field(alias="minOutputAmount")
    exchange_rate: float = Field(alias="exchangeRate")
    price_impact: str = Field(alias="priceImpact")
    slippage_bps: int = Field(alias="slippageBps")
    token_changes: list[TokenChange] = Field(alias="tokenChanges")


class SwapExecuteResponse(_CamelModel):
    """Swap outcome.

    Aggregator swaps return unsigned ``transactions`` for the wallet to sign;
    simulated swaps are recorded immediately and returned as ``transaction``.
    """

    provider: str
    quote: SwapQuoteResponse
    is_real_transaction: bool = Field(alias="isRealTransaction")
    signature: str | None = None
    transactions: list[str] = Field(default_factory=list)
    last_valid_block_height: int | None = Field(None, alias="lastValidBlockHeight")
    transaction: dict[str, Any] | None = None
