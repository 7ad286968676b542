"""Crypto factory for creating encryptor and signer instances.

Implements Factory pattern for crypto strategy instantiation.
"""

import logging

from src.core.config import config
from src.core.crypto.base import Encryptor, Signer
from src.core.crypto.base64_encryptor import Base64Encryptor
from src.core.crypto.hmac_signer import HMACSigner

logger = logging.getLogger(__name__)


class CryptoFactory:
    """Factory for creating crypto strategies (Factory pattern)."""

    @staticmethod
    def create_encryptor() -> Encryptor:
        return Base64Encryptor()

    @staticmethod
    def create_signer(key: bytes | None = None) -> Signer:
        """Create the HMAC signer.

        Args:
            key: Secret key (None = use SIGNING_SECRET from config).

        Returns:
            Configured HMACSigner instance.

        Raises:
            ValueError: If the resolved key is empty.
        """
        secret = key if key is not None else config.signing_key
        if not secret:
            raise ValueError("Signing key not configured")

        logger.info("Creating HMAC-SHA256 signer")
        return HMACSigner(secret)


__all__ = ["CryptoFactory"]
