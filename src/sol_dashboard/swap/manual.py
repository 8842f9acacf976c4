"""Fixed-rate swap backend used when no aggregator is configured.

Quotes SOL/USDC at a constant rate and simulates execution; nothing is
submitted to the chain.
"""

from __future__ import annotations

import logging
import math
import secrets

from sol_dashboard.swap.base import SwapExecution, SwapQuote, resolve_pair

logger = logging.getLogger(__name__)

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_SIGNATURE_LENGTH = 88


def simulated_signature() -> str:
    """Return a random base58 string shaped like a transaction signature."""
    return "".join(secrets.choice(_B58_ALPHABET) for _ in range(_SIGNATURE_LENGTH))


class ManualSwapProvider:
    """Fixed-rate SOL/USDC quoting with simulated execution.

    Args:
        rate: USDC received per SOL.
        slippage_bps: Default slippage tolerance applied to the minimum output.
    """

    name = "manual"

    def __init__(self, *, rate: float = 100.0, slippage_bps: int = 50) -> None:
        self._rate = rate
        self._slippage_bps = slippage_bps

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        *,
        slippage_bps: int | None = None,
    ) -> SwapQuote:
        input_token, output_token = resolve_pair(input_mint, output_mint, amount)
        bps = self._slippage_bps if slippage_bps is None else slippage_bps

        if input_token.is_native:
            output_amount = math.floor(
                amount * self._rate * 10**output_token.decimals / 10**input_token.decimals
            )
        else:
            output_amount = math.floor(
                amount * 10**output_token.decimals / (self._rate * 10**input_token.decimals)
            )

        return SwapQuote(
            provider=self.name,
            input_token=input_token,
            output_token=output_token,
            input_amount=amount,
            output_amount=output_amount,
            min_output_amount=output_amount * (10_000 - bps) // 10_000,
            slippage_bps=bps,
        )

    async def execute_swap(self, quote: SwapQuote, user_public_key: str) -> SwapExecution:
        signature = simulated_signature()
        logger.info(
            "Simulated %s -> %s swap for %s (%s)",
            quote.input_token.symbol,
            quote.output_token.symbol,
            user_public_key[:8],
            signature[:16],
        )
        return SwapExecution(
            provider=self.name,
            quote=quote,
            signature=signature,
            is_real_transaction=False,
        )
