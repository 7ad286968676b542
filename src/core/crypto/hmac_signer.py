"""HMAC-SHA256 signer for JSON objects."""

from __future__ import annotations

import hashlib
import hmac
import re
from typing import Any

from src.core.crypto.base import Signer
from src.utils.json_utils import dumps_compact

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


class HMACSigner(Signer):
    """Signs JSON objects with HMAC-SHA256 over a canonical string.

    The canonical string is built from one `key=value;` entry per property,
    sorted, so property order never changes the signature. Values are
    rendered as compact JSON with keys sorted at every depth.
    """

    def __init__(self, key: bytes) -> None:
        self._key = key

    @staticmethod
    def canonicalize(data: dict[str, Any]) -> str:
        """Build the deterministic string that gets signed."""
        entries = [f"{k}={dumps_compact(v, sort_keys=True)};" for k, v in data.items()]
        entries.sort()
        return "".join(entries)

    def _digest(self, data: dict[str, Any]) -> bytes:
        message = self.canonicalize(data).encode("utf-8")
        return hmac.new(self._key, message, hashlib.sha256).digest()

    def sign(self, data: dict[str, Any]) -> str:
        return self._digest(data).hex()

    def verify(self, data: dict[str, Any], signature: str) -> bool:
        """Check a hex signature in constant time.

        Signatures that are not hex-encoded byte strings never verify.
        """
        if not _HEX_RE.fullmatch(signature):
            return False
        return hmac.compare_digest(self._digest(data), bytes.fromhex(signature))


__all__ = ["HMACSigner"]
