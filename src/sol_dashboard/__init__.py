"""sol-dashboard — transaction ledger backend for a Solana wallet dashboard."""

__version__ = "0.1.0"
