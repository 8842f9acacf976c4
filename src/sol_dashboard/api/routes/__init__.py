"""REST API routes.

Combines all sub-routers under the ``/api`` prefix.
"""

from fastapi import APIRouter

from sol_dashboard.api.routes.swaps import router as swaps_router
from sol_dashboard.api.routes.transactions import router as transactions_router
from sol_dashboard.api.routes.wallets import router as wallets_router

api_router = APIRouter(prefix="/api")

api_router.include_router(transactions_router)
api_router.include_router(wallets_router)
api_router.include_router(swaps_router)

__all__ = ["api_router"]
