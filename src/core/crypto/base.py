"""Crypto strategy interfaces.

Defines the abstract Encryptor and Signer interfaces used by the payload
services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class DecryptionError(ValueError):
    """Raised when a value cannot be decrypted back into JSON."""


class Encryptor(ABC):
    """Abstract base class for value encryptors (Strategy pattern)."""

    @abstractmethod
    def encrypt(self, value: Any) -> str:
        """Encrypt a single JSON value into an opaque string."""
        raise NotImplementedError

    @abstractmethod
    def decrypt(self, value: Any) -> Any:
        """Decrypt a value produced by `encrypt`.

        Raises:
            DecryptionError: If the value was not produced by this encryptor.
        """
        raise NotImplementedError


class Signer(ABC):
    """Abstract base class for JSON object signers (Strategy pattern)."""

    @abstractmethod
    def sign(self, data: dict[str, Any]) -> str:
        """Return the signature of a JSON object."""
        raise NotImplementedError

    @abstractmethod
    def verify(self, data: dict[str, Any], signature: str) -> bool:
        """Return True if `signature` matches `data`."""
        raise NotImplementedError


__all__ = ["DecryptionError", "Encryptor", "Signer"]
