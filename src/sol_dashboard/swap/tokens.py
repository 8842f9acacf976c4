"""Token registry — mints, symbols and decimals the dashboard trades."""

from __future__ import annotations

from dataclasses import dataclass

from sol_dashboard.errors.definitions import ErrUnknownToken

WSOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT_DEVNET = "94CyfM1LcY8riaZJotZXGjB7GfjVZKWSiQ13DXwmnN8Z"
USDC_MINT_MAINNET = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


@dataclass(frozen=True)
class TokenInfo:
    """A tradeable token."""

    symbol: str
    mint: str
    decimals: int

    @property
    def is_native(self) -> bool:
        return self.mint == WSOL_MINT

    def to_ui(self, amount: int) -> float:
        """Convert an amount in smallest units to display units."""
        return amount / 10**self.decimals

    def to_base(self, ui_amount: float) -> int:
        """Convert a display amount to smallest units, rounding to the nearest unit."""
        return round(ui_amount * 10**self.decimals)


SOL = TokenInfo(symbol="SOL", mint=WSOL_MINT, decimals=9)
USDC = TokenInfo(symbol="USDC", mint=USDC_MINT_DEVNET, decimals=6)

_BY_MINT: dict[str, TokenInfo] = {
    WSOL_MINT: SOL,
    USDC_MINT_DEVNET: USDC,
    USDC_MINT_MAINNET: TokenInfo(symbol="USDC", mint=USDC_MINT_MAINNET, decimals=6),
}


def get_token(mint: str) -> TokenInfo:
    """Look up a token by mint address.

    Raises:
        LedgerError: If the mint is not in the registry.
    """
    token = _BY_MINT.get(mint)
    if token is None:
        raise ErrUnknownToken
    return token


def is_native_symbol(symbol: str) -> bool:
    return symbol.upper() == SOL.symbol
