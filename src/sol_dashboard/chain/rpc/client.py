"""Solana JSON-RPC client — transaction lookup, signature status, balances.

Async HTTP client for the subset of the Solana JSON-RPC API the ledger uses:
- ``getTransaction``
- ``getSignatureStatuses``
- ``getBalance``
- ``getTokenAccountsByOwner``
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

import httpx

from sol_dashboard.chain.rpc.models import ConfirmedTransaction, SignatureStatus
from sol_dashboard.errors.chain_errors import RPCError

if TYPE_CHECKING:
    from sol_dashboard.config.settings import SolanaConfig


class SolanaRPCClient:
    """Async JSON-RPC client bound to one cluster endpoint and commitment.

    Usage::

        rpc = SolanaRPCClient(config.solana)
        await rpc.connect()
        try:
            tx = await rpc.get_transaction(signature)
        finally:
            await rpc.close()
    """

    def __init__(self, config: SolanaConfig) -> None:
        """Initialize the RPC client.

        Args:
            config: Solana configuration (endpoint, commitment, timeout).
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._config.endpoint,
            headers={"Content-Type": "application/json"},
            timeout=self._config.request_timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    @property
    def commitment(self) -> str:
        return self._config.commitment.value

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_transaction(self, signature: str) -> ConfirmedTransaction | None:
        """Fetch a confirmed transaction by signature.

        Args:
            signature: Base58 transaction signature.

        Returns:
            The parsed transaction, or None if the node has no record of it.

        Raises:
            RPCError: On transport or JSON-RPC errors.
        """
        result = await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "json",
                    "commitment": self.commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        if not result:
            return None
        return ConfirmedTransaction.from_dict(signature, result)

    async def get_signature_statuses(
        self, signatures: list[str]
    ) -> list[SignatureStatus | None]:
        """Look up processing status for a batch of signatures.

        Returns:
            One entry per signature, None where the signature is unknown.
        """
        if not signatures:
            return []
        result = await self._call(
            "getSignatureStatuses",
            [signatures, {"searchTransactionHistory": True}],
        )
        try:
            values = (result or {}).get("value") or []
            return [SignatureStatus.from_dict(v) if v else None for v in values]
        except (AttributeError, TypeError, ValueError) as exc:
            raise RPCError(f"getSignatureStatuses returned a malformed result: {exc}") from exc

    async def get_balance(self, address: str) -> int:
        """Get the native balance of an account in lamports."""
        result = await self._call("getBalance", [address, {"commitment": self.commitment}])
        try:
            return int((result or {}).get("value", 0))
        except (AttributeError, TypeError, ValueError) as exc:
            raise RPCError(f"getBalance returned a malformed result: {exc}") from exc

    async def get_token_balance(self, owner: str, mint: str) -> float:
        """Get an owner's balance of one SPL token, in display units.

        Sums every token account the owner holds for *mint*; an owner with no
        token account has a balance of 0.
        """
        result = await self._call(
            "getTokenAccountsByOwner",
            [
                owner,
                {"mint": mint},
                {"encoding": "jsonParsed", "commitment": self.commitment},
            ],
        )
        total = 0.0
        try:
            for account in (result or {}).get("value", []):
                info = account["account"]["data"]["parsed"]["info"]
                amount = info["tokenAmount"]
                total += int(amount["amount"]) / 10 ** int(amount["decimals"])
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise RPCError(f"getTokenAccountsByOwner returned a malformed result: {exc}") from exc
        return total

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _call(self, method: str, params: list[Any]) -> Any:
        client = self._ensure_connected()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = await client.post("", json=payload)
        except httpx.HTTPError as exc:
            raise RPCError(f"{method} request failed: {exc}") from exc

        if response.status_code != 200:
            raise RPCError(f"{method} returned HTTP {response.status_code}")

        try:
            body: dict[str, Any] = response.json()
        except ValueError as exc:
            raise RPCError(f"{method} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise RPCError(f"{method} returned a non-object response")
        error = body.get("error")
        if error:
            message = error.get("message", "unknown error") if isinstance(error, dict) else error
            raise RPCError(f"{method} failed: {message}")
        return body.get("result")

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Solana RPC client not connected. Call connect() first."
            raise RPCError(msg, status_code=500)
        return self._client
