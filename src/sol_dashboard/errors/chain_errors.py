"""Upstream errors — Solana RPC and swap providers."""

from __future__ import annotations

from sol_dashboard.errors.ledger_errors import LedgerError


class RPCError(LedgerError):
    """Error from the Solana JSON-RPC endpoint."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="rpc-error")


class SwapError(LedgerError):
    """Error from a swap provider (Jupiter, Raydium)."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="swap-error")
