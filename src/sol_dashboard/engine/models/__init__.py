"""Engine data models (SQLAlchemy ORM).

Importing this package registers every model on ``Base.metadata``.
"""

from sol_dashboard.engine.models.base import Base, MetadataMixin, TimestampMixin
from sol_dashboard.engine.models.transaction import Transaction, TxStatus, TxType

__all__ = [
    "Base",
    "MetadataMixin",
    "TimestampMixin",
    "Transaction",
    "TxStatus",
    "TxType",
]
