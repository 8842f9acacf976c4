"""Tests for swap providers — manual mock, Jupiter and Raydium over mock transport."""

from __future__ import annotations

import json

import httpx
import pytest

from sol_dashboard.config.settings import SwapConfig, SwapProviderName
from sol_dashboard.errors.chain_errors import SwapError
from sol_dashboard.errors.ledger_errors import LedgerError
from sol_dashboard.swap import (
    JupiterSwapProvider,
    ManualSwapProvider,
    RaydiumSwapProvider,
    create_swap_provider,
)
from sol_dashboard.swap.jupiter import format_price_impact
from sol_dashboard.swap.tokens import SOL, USDC, USDC_MINT_DEVNET, WSOL_MINT, get_token

WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


def _attach(provider, handler, base_url: str):
    provider._client = httpx.AsyncClient(
        base_url=base_url, transport=httpx.MockTransport(handler)
    )
    return provider


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TestTokens:
    def test_lookup(self) -> None:
        assert get_token(WSOL_MINT) is SOL
        assert get_token(USDC_MINT_DEVNET) is USDC

    def test_unknown_mint(self) -> None:
        with pytest.raises(LedgerError) as exc_info:
            get_token("NotAMint")
        assert exc_info.value.code == "unknown-token"

    def test_unit_conversion(self) -> None:
        assert SOL.to_base(1.5) == 1_500_000_000
        assert USDC.to_ui(2_500_000) == 2.5

    @pytest.mark.parametrize(
        ("token", "ui_amount", "base"),
        [(USDC, 1.005, 1_005_000), (USDC, 0.29, 290_000), (SOL, 0.1 + 0.2, 300_000_000)],
    )
    def test_to_base_does_not_lose_a_unit(self, token, ui_amount, base) -> None:
        assert token.to_base(ui_amount) == base


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestFactory:
    @pytest.mark.parametrize(
        ("name", "cls"),
        [
            (SwapProviderName.MANUAL, ManualSwapProvider),
            (SwapProviderName.JUPITER, JupiterSwapProvider),
            (SwapProviderName.RAYDIUM, RaydiumSwapProvider),
        ],
    )
    def test_selects_backend(self, name, cls) -> None:
        provider = create_swap_provider(SwapConfig(provider=name))
        assert isinstance(provider, cls)
        assert provider.name == name.value


# ---------------------------------------------------------------------------
# Manual
# ---------------------------------------------------------------------------


class TestManualProvider:
    async def test_sol_to_usdc_quote(self) -> None:
        provider = ManualSwapProvider(rate=100.0, slippage_bps=50)
        quote = await provider.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        assert quote.output_amount == 100_000_000
        assert quote.output_ui_amount == 100.0
        assert quote.min_output_amount == 99_500_000
        assert quote.exchange_rate == 100.0

    async def test_usdc_to_sol_quote(self) -> None:
        provider = ManualSwapProvider(rate=100.0)
        quote = await provider.get_quote(USDC_MINT_DEVNET, WSOL_MINT, 50_000_000)
        assert quote.output_amount == 500_000_000
        assert quote.output_ui_amount == 0.5

    async def test_token_changes(self) -> None:
        quote = await ManualSwapProvider().get_quote(WSOL_MINT, USDC_MINT_DEVNET, 250_000_000)
        assert quote.token_changes() == [
            {"amount": -0.25, "tokenSymbol": "SOL"},
            {"amount": 25.0, "tokenSymbol": "USDC"},
        ]

    async def test_slippage_override(self) -> None:
        quote = await ManualSwapProvider().get_quote(
            WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000, slippage_bps=100
        )
        assert quote.slippage_bps == 100
        assert quote.min_output_amount == 99_000_000

    @pytest.mark.parametrize(
        ("input_mint", "output_mint", "amount", "code"),
        [
            (WSOL_MINT, WSOL_MINT, 1, "same-token-swap"),
            (WSOL_MINT, USDC_MINT_DEVNET, 0, "invalid-swap-amount"),
            (WSOL_MINT, "Unknown", 1, "unknown-token"),
        ],
    )
    async def test_invalid_requests(self, input_mint, output_mint, amount, code) -> None:
        with pytest.raises(LedgerError) as exc_info:
            await ManualSwapProvider().get_quote(input_mint, output_mint, amount)
        assert exc_info.value.code == code

    async def test_execute_is_simulated(self) -> None:
        provider = ManualSwapProvider()
        quote = await provider.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        execution = await provider.execute_swap(quote, WALLET)

        assert execution.is_real_transaction is False
        assert len(execution.signature) == 88
        assert execution.transactions == []

        candidate = execution.record_candidate(WALLET, timestamp=1_700_000_000)
        assert candidate["signature"] == execution.signature
        assert candidate["type"] == "swap"
        assert candidate["status"] == "confirmed"
        assert candidate["isRealTransaction"] is False
        assert candidate["tokenChanges"][1] == {"amount": 100.0, "tokenSymbol": "USDC"}


# ---------------------------------------------------------------------------
# Jupiter
# ---------------------------------------------------------------------------

JUPITER_URL = "https://jup.test/v6"

JUPITER_QUOTE = {
    "inputMint": WSOL_MINT,
    "inAmount": "1000000000",
    "outputMint": USDC_MINT_DEVNET,
    "outAmount": "101234567",
    "otherAmountThreshold": "100728394",
    "slippageBps": 50,
    "priceImpactPct": "0.0012",
    "routePlan": [{"swapInfo": {"label": "Orca"}, "percent": 100}],
}


class TestJupiterProvider:
    async def test_quote(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v6/quote"
            assert request.url.params["inputMint"] == WSOL_MINT
            assert request.url.params["amount"] == "1000000000"
            assert request.url.params["slippageBps"] == "50"
            return httpx.Response(200, json=JUPITER_QUOTE)

        jup = _attach(JupiterSwapProvider(JUPITER_URL), handler, JUPITER_URL)
        quote = await jup.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)

        assert quote.provider == "jupiter"
        assert quote.output_amount == 101_234_567
        assert quote.min_output_amount == 100_728_394
        assert quote.price_impact == "0.12%"
        assert quote.raw == JUPITER_QUOTE

    async def test_no_route(self) -> None:
        jup = _attach(
            JupiterSwapProvider(JUPITER_URL),
            lambda request: httpx.Response(200, json={**JUPITER_QUOTE, "routePlan": []}),
            JUPITER_URL,
        )
        with pytest.raises(LedgerError) as exc_info:
            await jup.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        assert exc_info.value.code == "no-route"

    async def test_http_error(self) -> None:
        jup = _attach(
            JupiterSwapProvider(JUPITER_URL),
            lambda request: httpx.Response(500, text="boom"),
            JUPITER_URL,
        )
        with pytest.raises(SwapError, match="HTTP 500"):
            await jup.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)

    async def test_execute(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v6/quote":
                return httpx.Response(200, json=JUPITER_QUOTE)
            assert request.url.path == "/v6/swap"
            body = json.loads(request.content)
            assert body["userPublicKey"] == WALLET
            assert body["quoteResponse"] == JUPITER_QUOTE
            return httpx.Response(
                200, json={"swapTransaction": "AQAAbase64", "lastValidBlockHeight": 123}
            )

        jup = _attach(JupiterSwapProvider(JUPITER_URL), handler, JUPITER_URL)
        quote = await jup.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        execution = await jup.execute_swap(quote, WALLET)

        assert execution.transactions == ["AQAAbase64"]
        assert execution.last_valid_block_height == 123
        assert execution.is_real_transaction is True
        assert execution.signature is None

    async def test_not_connected(self) -> None:
        with pytest.raises(SwapError, match="not connected"):
            await JupiterSwapProvider(JUPITER_URL).get_quote(
                WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000
            )

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>busy</html>"),
            httpx.Response(200, json=["unexpected"]),
            httpx.Response(200, json={k: v for k, v in JUPITER_QUOTE.items() if k != "outAmount"}),
            httpx.Response(200, json={**JUPITER_QUOTE, "outAmount": "lots"}),
        ],
    )
    async def test_malformed_quote(self, response) -> None:
        jup = _attach(JupiterSwapProvider(JUPITER_URL), lambda request: response, JUPITER_URL)
        with pytest.raises(SwapError) as exc_info:
            await jup.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        assert exc_info.value.status_code == 502

    async def test_malformed_swap_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v6/quote":
                return httpx.Response(200, json=JUPITER_QUOTE)
            return httpx.Response(200, text="gateway timeout")

        jup = _attach(JupiterSwapProvider(JUPITER_URL), handler, JUPITER_URL)
        quote = await jup.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        with pytest.raises(SwapError, match="invalid JSON"):
            await jup.execute_swap(quote, WALLET)


class TestFormatPriceImpact:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("0.0012", "0.12%"), (0, "< 0.01%"), ("0.00001", "< 0.01%"), (None, "< 0.01%")],
    )
    def test_format(self, value, expected) -> None:
        assert format_price_impact(value) == expected


# ---------------------------------------------------------------------------
# Raydium
# ---------------------------------------------------------------------------

RAYDIUM_URL = "https://raydium.test"

RAYDIUM_QUOTE = {
    "id": "q1",
    "success": True,
    "version": "V1",
    "data": {
        "swapType": "BaseIn",
        "inputMint": WSOL_MINT,
        "inputAmount": "1000000000",
        "outputMint": USDC_MINT_DEVNET,
        "outputAmount": "99000000",
        "otherAmountThreshold": "98505000",
        "slippageBps": 50,
        "priceImpactPct": 0.35,
        "routePlan": [{"poolId": "pool1"}],
    },
}


class TestRaydiumProvider:
    async def test_quote(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/compute/swap-base-in"
            assert request.url.params["txVersion"] == "V0"
            return httpx.Response(200, json=RAYDIUM_QUOTE)

        ray = _attach(RaydiumSwapProvider(RAYDIUM_URL), handler, RAYDIUM_URL)
        quote = await ray.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)

        assert quote.provider == "raydium"
        assert quote.output_amount == 99_000_000
        assert quote.min_output_amount == 98_505_000
        assert quote.price_impact == "0.35%"

    async def test_unsuccessful_response(self) -> None:
        ray = _attach(
            RaydiumSwapProvider(RAYDIUM_URL),
            lambda request: httpx.Response(200, json={"success": False, "msg": "REQ_AMOUNT"}),
            RAYDIUM_URL,
        )
        with pytest.raises(SwapError, match="REQ_AMOUNT"):
            await ray.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)

    async def test_execute(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=RAYDIUM_QUOTE)
            assert request.url.path == "/transaction/swap-base-in"
            body = json.loads(request.content)
            assert body["wallet"] == WALLET
            assert body["wrapSol"] is True
            assert body["unwrapSol"] is False
            assert body["swapResponse"] == RAYDIUM_QUOTE
            return httpx.Response(
                200,
                json={"success": True, "data": [{"transaction": "tx1"}, {"transaction": "tx2"}]},
            )

        ray = _attach(RaydiumSwapProvider(RAYDIUM_URL), handler, RAYDIUM_URL)
        quote = await ray.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        execution = await ray.execute_swap(quote, WALLET)
        assert execution.transactions == ["tx1", "tx2"]

        candidate = execution.record_candidate(WALLET, signature="realsig", timestamp=1)
        assert candidate["signature"] == "realsig"
        assert candidate["status"] == "pending"
        assert candidate["isRealTransaction"] is True

    async def test_execute_without_transactions(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=RAYDIUM_QUOTE)
            return httpx.Response(200, json={"success": True, "data": []})

        ray = _attach(RaydiumSwapProvider(RAYDIUM_URL), handler, RAYDIUM_URL)
        quote = await ray.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        with pytest.raises(SwapError, match="No swap transaction"):
            await ray.execute_swap(quote, WALLET)

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>busy</html>"),
            httpx.Response(200, json={"success": True, "data": ["route"]}),
            httpx.Response(
                200,
                json={
                    **RAYDIUM_QUOTE,
                    "data": {k: v for k, v in RAYDIUM_QUOTE["data"].items() if k != "outputAmount"},
                },
            ),
        ],
    )
    async def test_malformed_quote(self, response) -> None:
        ray = _attach(RaydiumSwapProvider(RAYDIUM_URL), lambda request: response, RAYDIUM_URL)
        with pytest.raises(SwapError) as exc_info:
            await ray.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        assert exc_info.value.status_code == 502

    async def test_malformed_transaction_payload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=RAYDIUM_QUOTE)
            return httpx.Response(200, json={"success": True, "data": {"transaction": "tx1"}})

        ray = _attach(RaydiumSwapProvider(RAYDIUM_URL), handler, RAYDIUM_URL)
        quote = await ray.get_quote(WSOL_MINT, USDC_MINT_DEVNET, 1_000_000_000)
        with pytest.raises(SwapError, match="malformed"):
            await ray.execute_swap(quote, WALLET)
