"""Solana JSON-RPC client and response models."""

from sol_dashboard.chain.rpc.client import SolanaRPCClient
from sol_dashboard.chain.rpc.models import (
    LAMPORTS_PER_SOL,
    ConfirmedTransaction,
    SignatureStatus,
    lamports_to_sol,
)

__all__ = [
    "LAMPORTS_PER_SOL",
    "ConfirmedTransaction",
    "SignatureStatus",
    "SolanaRPCClient",
    "lamports_to_sol",
]
