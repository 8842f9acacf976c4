"""Wallet endpoints."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from sol_dashboard.api.dependencies import get_engine
from sol_dashboard.api.schemas import BalanceResponse
from sol_dashboard.chain.rpc.models import lamports_to_sol
from sol_dashboard.config.settings import Cluster
from sol_dashboard.engine.client import LedgerEngine  # noqa: TC001
from sol_dashboard.swap.tokens import USDC_MINT_DEVNET, USDC_MINT_MAINNET

router = APIRouter(tags=["wallet"])


@router.get("/wallets/{wallet_address}/balances")
async def get_balances(
    wallet_address: str,
    engine: Annotated[LedgerEngine, Depends(get_engine)],
) -> dict:
    """Get the wallet's SOL and USDC balances."""
    usdc_mint = (
        USDC_MINT_MAINNET
        if engine.config.solana.cluster == Cluster.MAINNET_BETA
        else USDC_MINT_DEVNET
    )
    lamports, usdc = await asyncio.gather(
        engine.rpc.get_balance(wallet_address),
        engine.rpc.get_token_balance(wallet_address, usdc_mint),
    )
    return BalanceResponse(sol=lamports_to_sol(lamports), usdc=usdc).model_dump()
