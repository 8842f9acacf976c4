"""CORS middleware configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI


def setup_cors(app: FastAPI, origins: list[str]) -> None:
    """Allow the dashboard front end to call the API from *origins*.

    Credentials are only allowed for an explicit origin list; browsers reject
    them together with a ``*`` origin.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
