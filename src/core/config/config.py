"""Configuration management implementation.

Contains the AppConfig class implementation.
"""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DEFAULT_SIGNING_SECRET = "shared-secret-key"


class AppConfig:
    """Application configuration (Singleton pattern).

    Centralizes all configuration management with environment variable support.

    Use the `config` instance from __init__.py instead of creating new instances.
    """

    _instance: "AppConfig | None" = None
    _initialized: bool

    def __new__(cls) -> "AppConfig":
        """Singleton implementation - only one instance allowed."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        if self._initialized:
            return

        self._load_from_env()
        self._initialized = True
        logger.info("Configuration initialized")

    def _load_from_env(self) -> None:
        """Internal method to load values from environment variables."""
        # Network
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port_raw = os.getenv("PORT", str(DEFAULT_PORT))

        # Crypto
        self.signing_secret = os.getenv("SIGNING_SECRET", DEFAULT_SIGNING_SECRET)

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def reload(self) -> None:
        """Force reload configuration from environment variables."""
        logger.info("Reloading configuration from environment...")
        self._load_from_env()

    @property
    def port(self) -> int:
        """Listening port parsed from PORT.

        Raises:
            ValueError: If PORT is not an integer in 1..65535.
        """
        try:
            port = int(self.port_raw)
        except ValueError as e:
            raise ValueError(f"PORT must be an integer, got {self.port_raw!r}") from e
        if not 0 < port < 65536:
            raise ValueError(f"PORT out of range: {port}")
        return port

    @property
    def signing_key(self) -> bytes:
        return self.signing_secret.encode("utf-8")

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []
        try:
            self.port
        except ValueError as e:
            issues.append(str(e))
        if not self.signing_secret:
            issues.append("SIGNING_SECRET is empty")
        elif self.signing_secret == DEFAULT_SIGNING_SECRET:
            issues.append("SIGNING_SECRET not set, using the built-in default key")
        return issues

    def to_dict(self) -> dict[str, Any]:
        """Export configuration as dictionary (secrets excluded)."""
        return {
            "host": self.host,
            "port": self.port_raw,
            "log_level": self.log_level,
            "signing_secret_set": self.signing_secret != DEFAULT_SIGNING_SECRET,
        }


__all__ = ["AppConfig", "DEFAULT_PORT", "DEFAULT_SIGNING_SECRET"]
