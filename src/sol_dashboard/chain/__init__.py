"""Chain access — Solana JSON-RPC client and the transfer reader."""

from sol_dashboard.chain.reader import ChainReader, ChainTransfer, detect_transfer
from sol_dashboard.chain.rpc.client import SolanaRPCClient

__all__ = ["ChainReader", "ChainTransfer", "SolanaRPCClient", "detect_transfer"]
