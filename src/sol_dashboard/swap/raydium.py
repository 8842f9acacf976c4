"""Raydium trade API backend.

Async HTTP client for the Raydium transaction API:
- GET  /compute/swap-base-in     — route and amounts for a fixed input
- POST /transaction/swap-base-in — serialized (unsigned) transactions
"""

from __future__ import annotations

from typing import Any

import httpx

from sol_dashboard.errors.chain_errors import SwapError
from sol_dashboard.errors.definitions import ErrNoRoute
from sol_dashboard.swap.base import SwapExecution, SwapQuote, resolve_pair, response_json
from sol_dashboard.swap.jupiter import format_price_impact

_TX_VERSION = "V0"


class RaydiumSwapProvider:
    """Quotes and builds swaps through Raydium's AMM pools."""

    name = "raydium"

    def __init__(
        self,
        base_url: str,
        *,
        slippage_bps: int = 50,
        timeout: float = 30.0,
        compute_unit_price: str = "auto",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._slippage_bps = slippage_bps
        self._timeout = timeout
        self._compute_unit_price = compute_unit_price
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

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        *,
        slippage_bps: int | None = None,
    ) -> SwapQuote:
        """Compute a swap-base-in route.

        Raises:
            LedgerError: On invalid pair or when no pool can fill the swap.
            SwapError: On HTTP or API errors.
        """
        input_token, output_token = resolve_pair(input_mint, output_mint, amount)
        bps = self._slippage_bps if slippage_bps is None else slippage_bps

        data = await self._request(
            "GET",
            "/compute/swap-base-in",
            params={
                "inputMint": input_mint,
                "outputMint": output_mint,
                "amount": str(amount),
                "slippageBps": str(bps),
                "txVersion": _TX_VERSION,
            },
        )
        route = data.get("data") or {}
        if not isinstance(route, dict):
            raise SwapError("Raydium /compute/swap-base-in returned a malformed route")
        if not route.get("routePlan"):
            raise ErrNoRoute

        try:
            out_amount = int(route["outputAmount"])
            return SwapQuote(
                provider=self.name,
                input_token=input_token,
                output_token=output_token,
                input_amount=int(route.get("inputAmount", amount)),
                output_amount=out_amount,
                min_output_amount=int(route.get("otherAmountThreshold", out_amount)),
                slippage_bps=int(route.get("slippageBps", bps)),
                price_impact=format_price_impact(float(route.get("priceImpactPct") or 0) / 100),
                raw=data,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SwapError(f"Raydium quote is malformed: {exc}") from exc

    async def execute_swap(self, quote: SwapQuote, user_public_key: str) -> SwapExecution:
        """Build the swap transactions for *quote*, to be signed by the wallet.

        Raises:
            SwapError: On HTTP errors or when no transaction is returned.
        """
        data = await self._request(
            "POST",
            "/transaction/swap-base-in",
            json={
                "computeUnitPriceMicroLamports": self._compute_unit_price,
                "swapResponse": quote.raw,
                "txVersion": _TX_VERSION,
                "wallet": user_public_key,
                "wrapSol": quote.input_token.is_native,
                "unwrapSol": quote.output_token.is_native,
            },
        )
        items = data.get("data") or []
        if not isinstance(items, list):
            raise SwapError("Raydium /transaction/swap-base-in returned a malformed payload")
        transactions = [
            item["transaction"]
            for item in items
            if isinstance(item, dict) and isinstance(item.get("transaction"), str)
        ]
        if not transactions:
            raise SwapError("No swap transaction returned from Raydium")

        return SwapExecution(provider=self.name, quote=quote, transactions=transactions)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        client = self._ensure_connected()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise SwapError(f"Raydium request {path} failed: {exc}") from exc

        if response.status_code != 200:
            raise SwapError(f"Raydium {path} returned HTTP {response.status_code}")

        data = response_json(response, f"Raydium {path}")
        if not data.get("success", False):
            raise SwapError(f"Raydium {path} failed: {data.get('msg', 'unknown error')}")
        return data

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Raydium client not connected. Call connect() first."
            raise SwapError(msg, status_code=500)
        return self._client
