"""Swap capability — quote/execute interface and its value types.

Every backend (fixed-rate mock, Jupiter, Raydium) implements
:class:`SwapProvider`; callers never branch on which one is configured.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from sol_dashboard.errors.chain_errors import SwapError
from sol_dashboard.errors.definitions import (
    ErrInvalidSwapAmount,
    ErrSameTokenSwap,
)
from sol_dashboard.swap.tokens import get_token

if TYPE_CHECKING:
    import httpx

    from sol_dashboard.swap.tokens import TokenInfo


@dataclass(frozen=True)
class SwapQuote:
    """A priced swap route.

    Amounts are in each token's smallest unit. ``raw`` keeps the upstream
    payload that the provider needs back at execution time.
    """

    provider: str
    input_token: TokenInfo
    output_token: TokenInfo
    input_amount: int
    output_amount: int
    min_output_amount: int
    slippage_bps: int
    price_impact: str = "< 0.01%"
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def input_ui_amount(self) -> float:
        return self.input_token.to_ui(self.input_amount)

    @property
    def output_ui_amount(self) -> float:
        return self.output_token.to_ui(self.output_amount)

    @property
    def exchange_rate(self) -> float:
        """Output tokens received per input token."""
        if not self.input_amount:
            return 0.0
        return round(self.output_ui_amount / self.input_ui_amount, 6)

    def token_changes(self) -> list[dict[str, Any]]:
        """Signed balance deltas for the swapping wallet, input leg first."""
        return [
            {"amount": -self.input_ui_amount, "tokenSymbol": self.input_token.symbol},
            {"amount": self.output_ui_amount, "tokenSymbol": self.output_token.symbol},
        ]


@dataclass(frozen=True)
class SwapExecution:
    """Result of executing a quote.

    Aggregator backends return unsigned, base64-encoded ``transactions`` for
    the wallet to sign and submit; the mock backend returns a simulated
    ``signature`` instead.
    """

    provider: str
    quote: SwapQuote
    transactions: list[str] = field(default_factory=list)
    signature: str | None = None
    is_real_transaction: bool = True
    last_valid_block_height: int | None = None

    def record_candidate(
        self, wallet_address: str, *, signature: str | None = None, timestamp: int
    ) -> dict[str, Any]:
        """Build a transaction-record candidate for this swap.

        Args:
            wallet_address: The swapping wallet.
            signature: Chain signature once the wallet submitted the
                transaction; defaults to the simulated signature.
            timestamp: Seconds since epoch.
        """
        return {
            "signature": signature or self.signature,
            "walletAddress": wallet_address,
            "type": "swap",
            "tokenChanges": self.quote.token_changes(),
            "status": "confirmed" if not self.is_real_transaction else "pending",
            "timestamp": timestamp,
            "inputMint": self.quote.input_token.mint,
            "outputMint": self.quote.output_token.mint,
            "priceImpact": self.quote.price_impact,
            "isRealTransaction": self.is_real_transaction,
        }


class SwapProvider(Protocol):
    """Protocol for swap backends."""

    name: str

    async def connect(self) -> None: ...

    async def close(self) -> None: ...

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        *,
        slippage_bps: int | None = None,
    ) -> SwapQuote: ...

    async def execute_swap(self, quote: SwapQuote, user_public_key: str) -> SwapExecution: ...


def resolve_pair(input_mint: str, output_mint: str, amount: int) -> tuple[TokenInfo, TokenInfo]:
    """Validate a swap request and return the (input, output) tokens."""
    if amount <= 0:
        raise ErrInvalidSwapAmount
    if input_mint == output_mint:
        raise ErrSameTokenSwap
    return get_token(input_mint), get_token(output_mint)


def response_json(response: httpx.Response, context: str) -> dict[str, Any]:
    """Decode an upstream JSON object body.

    Raises:
        SwapError: If the body is not JSON or not an object.
    """
    try:
        data = response.json()
    except ValueError as exc:
        raise SwapError(f"{context} returned invalid JSON") from exc
    if not isinstance(data, dict):
        raise SwapError(f"{context} returned a non-object response")
    return data
