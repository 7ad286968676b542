"""Base64 value encryptor.

Each value is serialized to compact JSON, then encoded with the standard
base64 alphabet. Decryption only accepts canonical, padded standard base64
that decodes to valid UTF-8 JSON.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from src.core.crypto.base import DecryptionError, Encryptor
from src.utils.json_utils import dumps_compact, loads_strict


class Base64Encryptor(Encryptor):
    """Reversible, keyless encoding of JSON values."""

    def encrypt(self, value: Any) -> str:
        raw = dumps_compact(value).encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def decrypt(self, value: Any) -> Any:
        if not isinstance(value, str):
            raise DecryptionError(f"Cannot decrypt non-string value of type {type(value).__name__}")

        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecryptionError("Value is not valid base64") from e
        # Non-zero trailing bits decode fine but are not canonical encodings
        if base64.b64encode(raw).decode("ascii") != value:
            raise DecryptionError("Value is not canonical base64")

        try:
            return loads_strict(raw)
        except ValueError as e:
            raise DecryptionError("Decoded value is not valid JSON") from e


__all__ = ["Base64Encryptor"]
