"""Configuration — pydantic-settings models backed by env vars and YAML."""

from sol_dashboard.config.settings import AppConfig

__all__ = ["AppConfig"]
