"""Payload services used by the HTTP layer."""

from src.core.services.payload_encryption import PayloadEncryptionService, apply_to_values
from src.core.services.payload_signing import InvalidPayloadError, PayloadSigningService

__all__ = [
    "InvalidPayloadError",
    "PayloadEncryptionService",
    "PayloadSigningService",
    "apply_to_values",
]
