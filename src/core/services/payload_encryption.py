"""Depth-1 encryption of JSON payloads.

Object payloads have each top-level value transformed independently while
keys are kept; nested objects and arrays are treated as single values. Any
other payload is transformed as one value.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from src.core.crypto.base import DecryptionError, Encryptor

logger = logging.getLogger(__name__)


def apply_to_values(payload: Any, method: Callable[[Any], Any]) -> Any:
    """Apply `method` to every depth-1 value of an object, or to the payload itself."""
    if isinstance(payload, dict):
        return {key: method(value) for key, value in payload.items()}
    return method(payload)


class PayloadEncryptionService:
    """Encrypts and decrypts JSON payloads with a pluggable Encryptor."""

    def __init__(self, encryptor: Encryptor) -> None:
        self.encryptor = encryptor

    def encrypt(self, payload: Any) -> Any:
        return apply_to_values(payload, self.encryptor.encrypt)

    def decrypt(self, payload: Any) -> Any:
        """Decrypt every value that can be decrypted, leaving the rest untouched."""
        return apply_to_values(payload, self._decrypt_or_passthrough)

    def _decrypt_or_passthrough(self, value: Any) -> Any:
        try:
            return self.encryptor.decrypt(value)
        except DecryptionError as e:
            logger.debug("Leaving value unchanged: %s", e)
            return value


__all__ = ["PayloadEncryptionService", "apply_to_values"]
