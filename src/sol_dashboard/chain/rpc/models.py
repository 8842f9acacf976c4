"""Solana JSON-RPC response models.

Thin dataclasses over the ``getTransaction`` and ``getSignatureStatuses``
result payloads; only the fields the ledger reads are kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

LAMPORTS_PER_SOL = 1_000_000_000


def lamports_to_sol(lamports: int) -> float:
    """Convert lamports to SOL."""
    return lamports / LAMPORTS_PER_SOL


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"unexpected {what} shape: {type(value).__name__}"
        raise ValueError(msg)
    return value


def _sequence(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"unexpected {what} shape: {type(value).__name__}"
        raise ValueError(msg)
    return value


def _account_key(entry: Any) -> str:
    # ``jsonParsed`` encoding returns {"pubkey": ..., "signer": ...} objects
    if isinstance(entry, dict):
        return str(entry.get("pubkey", ""))
    return str(entry)


@dataclass
class ConfirmedTransaction:
    """A confirmed transaction as returned by ``getTransaction``.

    ``account_keys`` lists static keys followed by any address-lookup-table
    keys (writable, then readonly), which is the order the balance arrays
    follow.
    """

    signature: str
    slot: int = 0
    block_time: int | None = None
    fee: int = 0
    account_keys: list[str] = field(default_factory=list)
    pre_balances: list[int] = field(default_factory=list)
    post_balances: list[int] = field(default_factory=list)
    err: Any = None

    @property
    def succeeded(self) -> bool:
        return self.err is None

    @classmethod
    def from_dict(cls, signature: str, data: Any) -> ConfirmedTransaction:
        """Build from a ``getTransaction`` result object.

        Raises:
            ValueError: If the payload is not ``json``-encoded or is malformed.
        """
        data = _mapping(data, "result")
        meta = _mapping(data.get("meta"), "meta")
        transaction = _mapping(data.get("transaction"), "transaction")
        message = _mapping(transaction.get("message"), "message")

        keys = [_account_key(k) for k in _sequence(message.get("accountKeys"), "accountKeys")]
        loaded = _mapping(meta.get("loadedAddresses"), "loadedAddresses")
        keys.extend(_sequence(loaded.get("writable"), "writable"))
        keys.extend(_sequence(loaded.get("readonly"), "readonly"))

        return cls(
            signature=signature,
            slot=int(data.get("slot", 0)),
            block_time=data.get("blockTime"),
            fee=int(meta.get("fee", 0)),
            account_keys=keys,
            pre_balances=[int(b) for b in _sequence(meta.get("preBalances"), "preBalances")],
            post_balances=[int(b) for b in _sequence(meta.get("postBalances"), "postBalances")],
            err=meta.get("err"),
        )


@dataclass(frozen=True)
class SignatureStatus:
    """Entry from ``getSignatureStatuses``."""

    slot: int = 0
    confirmations: int | None = None
    err: Any = None
    confirmation_status: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> SignatureStatus:
        data = _mapping(data, "signature status")
        return cls(
            slot=int(data.get("slot", 0)),
            confirmations=data.get("confirmations"),
            err=data.get("err"),
            confirmation_status=data.get("confirmationStatus") or "",
        )
