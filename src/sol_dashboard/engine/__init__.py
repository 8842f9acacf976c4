"""Ledger engine — models, services and the central engine client."""
