"""API middleware — CORS."""

from sol_dashboard.api.middleware.cors import setup_cors

__all__ = ["setup_cors"]
