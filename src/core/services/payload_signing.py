"""Signing and verification of JSON object payloads."""

from __future__ import annotations

import logging
from typing import Any

from src.core.crypto.base import Signer

logger = logging.getLogger(__name__)


class InvalidPayloadError(ValueError):
    """Raised when a payload does not have the shape an operation requires."""


class PayloadSigningService:
    """Wraps a Signer with the payload shape rules of /sign and /verify."""

    def __init__(self, signer: Signer) -> None:
        self.signer = signer

    def sign(self, payload: Any) -> str:
        """Sign a JSON object.

        Raises:
            InvalidPayloadError: If the payload is not a JSON object.
        """
        if not isinstance(payload, dict):
            raise InvalidPayloadError("expected a JSON object")
        return self.signer.sign(payload)

    def verify(self, payload: Any) -> bool:
        """Verify a `{"signature": str, "data": object}` envelope.

        Malformed envelopes are reported as not verified.
        """
        if not isinstance(payload, dict):
            return False

        signature = payload.get("signature")
        data = payload.get("data")
        if not isinstance(signature, str) or not isinstance(data, dict):
            logger.debug("Rejecting malformed verify envelope")
            return False

        return self.signer.verify(data, signature)


__all__ = ["InvalidPayloadError", "PayloadSigningService"]
