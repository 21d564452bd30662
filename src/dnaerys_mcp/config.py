"""Configuration for the dnaerys-mcp server, loaded from environment variables."""

import os
from dataclasses import dataclass

from .constants import (
    DEFAULT_ASSEMBLY,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_RATE_LIMIT,
    DEFAULT_STORE_TIMEOUT_SECONDS,
    DEFAULT_STORE_URL,
    DEFAULT_TRANSPORT,
    LOG_LEVELS,
    SUPPORTED_ASSEMBLIES,
)


def _env_flag(name: str, default: bool) -> bool:
    return os.environ.get(name, str(default)).lower() == "true"


@dataclass
class DnaerysConfig:
    """Server configuration loaded from environment variables."""

    # Variant store settings
    store_url: str = DEFAULT_STORE_URL
    store_api_key: str | None = None
    store_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS
    assembly: str = DEFAULT_ASSEMBLY

    # Transport settings
    transport: str = DEFAULT_TRANSPORT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    rate_limit: int = DEFAULT_RATE_LIMIT
    trusted_hosts: list[str] | None = None
    trust_forwarded: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    # Normalization policies
    reset_contradictory_lengths: bool = True
    zero_af_is_constraint: bool = False

    def __post_init__(self) -> None:
        """Validate config values."""
        if not self.store_url.startswith(("http://", "https://")):
            raise ValueError(f"store_url must be an http(s) URL, got '{self.store_url}'")
        self.store_url = self.store_url.rstrip("/")

        if self.store_timeout <= 0:
            raise ValueError(f"store_timeout must be positive, got {self.store_timeout}")

        if self.assembly not in SUPPORTED_ASSEMBLIES:
            raise ValueError(
                f"assembly must be one of {SUPPORTED_ASSEMBLIES}, got '{self.assembly}'"
            )

        valid_transports = ("stdio", "sse", "streamable-http")
        if self.transport not in valid_transports:
            raise ValueError(f"transport must be one of {valid_transports}, got '{self.transport}'")

        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")

        if self.rate_limit < 1:
            raise ValueError(f"rate_limit must be at least 1, got {self.rate_limit}")

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got '{self.log_level}'")

    @classmethod
    def from_env(cls) -> "DnaerysConfig":
        """Create config from environment variables."""
        env = os.environ

        return cls(
            store_url=env.get("DNAERYS_STORE_URL", DEFAULT_STORE_URL),
            store_api_key=env.get("DNAERYS_STORE_API_KEY") or None,
            store_timeout=float(
                env.get("DNAERYS_STORE_TIMEOUT", str(DEFAULT_STORE_TIMEOUT_SECONDS))
            ),
            assembly=env.get("DNAERYS_ASSEMBLY", DEFAULT_ASSEMBLY),
            transport=env.get("DNAERYS_TRANSPORT", DEFAULT_TRANSPORT),
            host=env.get("DNAERYS_HOST", DEFAULT_HOST),
            port=int(env.get("DNAERYS_PORT", str(DEFAULT_PORT))),
            rate_limit=int(env.get("DNAERYS_RATE_LIMIT", str(DEFAULT_RATE_LIMIT))),
            trusted_hosts=[
                h.strip() for h in env.get("DNAERYS_TRUSTED_HOSTS", "").split(",") if h.strip()
            ]
            or None,
            trust_forwarded=_env_flag("DNAERYS_TRUST_FORWARDED", False),
            log_level=env.get("DNAERYS_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            reset_contradictory_lengths=_env_flag("DNAERYS_RESET_CONTRADICTORY_LENGTHS", True),
            zero_af_is_constraint=_env_flag("DNAERYS_ZERO_AF_IS_CONSTRAINT", False),
        )
