"""Transaction model — recorded wallet transfers and swaps."""

from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sol_dashboard.engine.models.base import Base, MetadataMixin, TimestampMixin


class TxType(enum.StrEnum):
    """Kind of on-chain action a record describes."""

    TRANSFER = "transfer"
    SWAP = "swap"


class TxStatus(enum.StrEnum):
    """Record status.

    Lifecycle: PENDING → CONFIRMED | FAILED. Both outcomes are terminal.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TxStatus.PENDING


class Transaction(Base, TimestampMixin, MetadataMixin):
    """A client-submitted transaction record, optionally enriched from chain data.

    Only ``status`` changes after creation. ``id`` is a surrogate key that
    preserves insertion order; ``signature`` carries the uniqueness constraint.
    """

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_wallet_timestamp", "wallet_address", "timestamp"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    signature: Mapped[str] = mapped_column(
        String(128), nullable=False, unique=True, comment="Chain transaction signature"
    )
    wallet_address: Mapped[str] = mapped_column(
        String(64), nullable=False, comment="Initiating wallet public key"
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False, comment="transfer | swap")
    token_changes: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list, comment="[{amount, tokenSymbol}, ...]"
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=TxStatus.PENDING.value,
        comment="pending | confirmed | failed",
    )
    timestamp: Mapped[int] = mapped_column(
        BigInteger, nullable=False, comment="Seconds since epoch at creation"
    )
    explorer_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Enrichment (authoritative, from chain data)
    from_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    to_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    value: Mapped[float | None] = mapped_column(Float, nullable=True, comment="SOL moved")

    # Client-supplied, not verified
    fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    price_impact: Mapped[str | None] = mapped_column(String(32), nullable=True)
    input_mint: Mapped[str | None] = mapped_column(String(64), nullable=True)
    output_mint: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_real_transaction: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    @property
    def tx_status(self) -> TxStatus:
        return TxStatus(self.status)

    def __repr__(self) -> str:
        return f"<Transaction signature={self.signature[:16]}... status={self.status}>"
