"""Swap providers — one quote/execute interface over interchangeable backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sol_dashboard.config.settings import SwapProviderName
from sol_dashboard.swap.base import SwapExecution, SwapProvider, SwapQuote
from sol_dashboard.swap.jupiter import JupiterSwapProvider
from sol_dashboard.swap.manual import ManualSwapProvider
from sol_dashboard.swap.raydium import RaydiumSwapProvider

if TYPE_CHECKING:
    from sol_dashboard.config.settings import SwapConfig


def create_swap_provider(config: SwapConfig) -> SwapProvider:
    """Instantiate the backend selected by ``config.provider``.

    Raises:
        ValueError: If the provider name is not supported.
    """
    if config.provider == SwapProviderName.MANUAL:
        return ManualSwapProvider(rate=config.mock_rate, slippage_bps=config.slippage_bps)
    if config.provider == SwapProviderName.JUPITER:
        return JupiterSwapProvider(
            config.jupiter_url, slippage_bps=config.slippage_bps, timeout=config.timeout
        )
    if config.provider == SwapProviderName.RAYDIUM:
        return RaydiumSwapProvider(
            config.raydium_url, slippage_bps=config.slippage_bps, timeout=config.timeout
        )
    msg = f"Unsupported swap provider: {config.provider}"
    raise ValueError(msg)


__all__ = [
    "JupiterSwapProvider",
    "ManualSwapProvider",
    "RaydiumSwapProvider",
    "SwapExecution",
    "SwapProvider",
    "SwapQuote",
    "create_swap_provider",
]
