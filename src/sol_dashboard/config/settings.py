"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``SOLDASH_``, nested via ``__``)
2. YAML config file (``config_path`` or ``SOLDASH_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class DatabaseEngine(enum.StrEnum):
    """Supported database engines."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class Cluster(enum.StrEnum):
    """Solana network clusters."""

    DEVNET = "devnet"
    TESTNET = "testnet"
    MAINNET_BETA = "mainnet-beta"


class Commitment(enum.StrEnum):
    """RPC commitment levels."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


class SwapProviderName(enum.StrEnum):
    """Available swap execution backends."""

    MANUAL = "manual"
    JUPITER = "jupiter"
    RAYDIUM = "raydium"


_CLUSTER_RPC_URLS = {
    Cluster.DEVNET: "https://api.devnet.solana.com",
    Cluster.TESTNET: "https://api.testnet.solana.com",
    Cluster.MAINNET_BETA: "https://api.mainnet-beta.solana.com",
}


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class DatabaseConfig(BaseSettings):
    """Database settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_DB__",
        case_sensitive=False,
    )

    engine: DatabaseEngine = Field(
        default=DatabaseEngine.SQLITE,
        description="Database backend: sqlite or postgresql",
    )
    dsn: str = Field(
        default="sqlite+aiosqlite:///./sol_dashboard.db",
        description="Async database connection string",
    )
    max_idle_connections: int = 5
    max_open_connections: int = 10
    debug_sql: bool = False

    @model_validator(mode="after")
    def _check_dsn_matches_engine(self) -> Self:
        scheme = self.dsn.split(":", 1)[0].split("+", 1)[0]
        if scheme != self.engine.value:
            msg = f"db.dsn scheme {scheme!r} does not match db.engine {self.engine.value!r}"
            raise ValueError(msg)
        return self


class SolanaConfig(BaseSettings):
    """Solana RPC and enrichment settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_SOLANA__",
        case_sensitive=False,
    )

    cluster: Cluster = Cluster.DEVNET
    rpc_url: str = Field(
        default="",
        description="JSON-RPC endpoint; derived from the cluster when empty",
    )
    commitment: Commitment = Commitment.CONFIRMED
    request_timeout: float = 30.0
    enrichment_timeout: float = 5.0
    enrich_transfers: bool = True

    @property
    def endpoint(self) -> str:
        """Return the effective RPC endpoint URL."""
        return self.rpc_url or _CLUSTER_RPC_URLS[self.cluster]


class SwapConfig(BaseSettings):
    """Swap provider settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_SWAP__",
        case_sensitive=False,
    )

    provider: SwapProviderName = SwapProviderName.MANUAL
    jupiter_url: str = "https://quote-api.jup.ag/v6"
    raydium_url: str = "https://transaction-v1.raydium.io"
    mock_rate: float = 100.0
    slippage_bps: int = Field(default=50, ge=0, le=10_000)
    timeout: float = 30.0


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


class TaskConfig(BaseSettings):
    """Background task settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_TASK__",
        case_sensitive=False,
    )

    enabled: bool = True
    reconcile_period: float = 30.0
    reconcile_batch_size: int = 100


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``SOLDASH_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLDASH_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    solana: SolanaConfig = Field(default_factory=SolanaConfig)
    swap: SwapConfig = Field(default_factory=SwapConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    task: TaskConfig = Field(default_factory=TaskConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
