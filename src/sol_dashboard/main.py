"""Application entry point for the sol-dashboard API server."""

from __future__ import annotations

import os

import uvicorn

from sol_dashboard.config.settings import AppConfig


def main() -> None:
    """Start the API server."""
    config = AppConfig()
    reload = os.getenv("SOLDASH_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "sol_dashboard.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=reload,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
