"""Error types and predefined error instances."""

from sol_dashboard.errors.chain_errors import RPCError, SwapError
from sol_dashboard.errors.ledger_errors import LedgerError

__all__ = ["LedgerError", "RPCError", "SwapError"]
