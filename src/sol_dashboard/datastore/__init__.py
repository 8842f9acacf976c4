"""Datastore — async SQLAlchemy engine and session management."""

from sol_dashboard.datastore.client import Datastore

__all__ = ["Datastore"]
