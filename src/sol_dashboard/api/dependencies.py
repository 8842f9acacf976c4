"""FastAPI dependency injection helpers.

Usage in a route::

    @router.get("/transactions/{wallet_address}")
    async def list_transactions(
        engine: Annotated[LedgerEngine, Depends(get_engine)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from fastapi import Request

from sol_dashboard.engine.client import LedgerEngine  # noqa: TC001
from sol_dashboard.errors.definitions import ErrEngineNotReady


def get_engine(request: Request) -> LedgerEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        LedgerError: 503 if the engine is not initialized.
    """
    engine: LedgerEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.is_initialized:
        raise ErrEngineNotReady
    return engine
