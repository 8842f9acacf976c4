"""Jupiter aggregator backend.

Async HTTP client for the Jupiter v6 swap API:
- GET  /quote — best route for an input/output mint pair
- POST /swap  — serialized (unsigned) transaction for a quote
"""

from __future__ import annotations

from typing import Any

import httpx

from sol_dashboard.errors.chain_errors import SwapError
from sol_dashboard.errors.definitions import ErrNoRoute
from sol_dashboard.swap.base import SwapExecution, SwapQuote, resolve_pair, response_json


def format_price_impact(pct: Any) -> str:
    """Render an upstream price-impact fraction (``"0.0012"``) as a percentage."""
    try:
        value = float(pct)
    except (TypeError, ValueError):
        return "< 0.01%"
    if value * 100 < 0.01:
        return "< 0.01%"
    return f"{value * 100:.2f}%"


class JupiterSwapProvider:
    """Quotes and builds swaps through the Jupiter aggregator.

    Usage::

        jup = JupiterSwapProvider("https://quote-api.jup.ag/v6")
        await jup.connect()
        try:
            quote = await jup.get_quote(SOL_MINT, USDC_MINT, 1_000_000)
            execution = await jup.execute_swap(quote, wallet)
        finally:
            await jup.close()
    """

    name = "jupiter"

    def __init__(self, base_url: str, *, slippage_bps: int = 50, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._slippage_bps = slippage_bps
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        *,
        slippage_bps: int | None = None,
    ) -> SwapQuote:
        """Fetch the best route for *amount* (smallest units) of *input_mint*.

        Raises:
            LedgerError: On invalid pair or when no route exists.
            SwapError: On HTTP or API errors.
        """
        input_token, output_token = resolve_pair(input_mint, output_mint, amount)
        bps = self._slippage_bps if slippage_bps is None else slippage_bps
        client = self._ensure_connected()

        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": str(bps),
            "onlyDirectRoutes": "false",
            "asLegacyTransaction": "false",
        }
        try:
            response = await client.get("/quote", params=params)
        except httpx.HTTPError as exc:
            raise SwapError(f"Jupiter quote failed: {exc}") from exc

        if response.status_code != 200:
            raise SwapError(f"Jupiter quote returned HTTP {response.status_code}")

        data = response_json(response, "Jupiter quote")
        if data.get("error"):
            raise SwapError(f"Jupiter quote failed: {data['error']}")
        if not data.get("routePlan"):
            raise ErrNoRoute

        try:
            out_amount = int(data["outAmount"])
            return SwapQuote(
                provider=self.name,
                input_token=input_token,
                output_token=output_token,
                input_amount=int(data.get("inAmount", amount)),
                output_amount=out_amount,
                min_output_amount=int(data.get("otherAmountThreshold", out_amount)),
                slippage_bps=int(data.get("slippageBps", bps)),
                price_impact=format_price_impact(data.get("priceImpactPct")),
                raw=data,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SwapError(f"Jupiter quote is malformed: {exc}") from exc

    async def execute_swap(self, quote: SwapQuote, user_public_key: str) -> SwapExecution:
        """Request the swap transaction for *quote*, to be signed by the wallet.

        Raises:
            SwapError: On HTTP errors or when no transaction is returned.
        """
        client = self._ensure_connected()
        payload = {
            "quoteResponse": quote.raw,
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
            "prioritizationFeeLamports": "auto",
        }
        try:
            response = await client.post("/swap", json=payload)
        except httpx.HTTPError as exc:
            raise SwapError(f"Jupiter swap failed: {exc}") from exc

        if response.status_code != 200:
            raise SwapError(f"Jupiter swap returned HTTP {response.status_code}")

        data = response_json(response, "Jupiter swap")
        swap_tx = data.get("swapTransaction")
        if not swap_tx or not isinstance(swap_tx, str):
            raise SwapError("No swap transaction returned from Jupiter")

        return SwapExecution(
            provider=self.name,
            quote=quote,
            transactions=[swap_tx],
            last_valid_block_height=data.get("lastValidBlockHeight"),
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Jupiter client not connected. Call connect() first."
            raise SwapError(msg, status_code=500)
        return self._client
