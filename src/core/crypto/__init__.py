"""Crypto package exports."""

from src.core.crypto.base import DecryptionError, Encryptor, Signer
from src.core.crypto.base64_encryptor import Base64Encryptor
from src.core.crypto.factory import CryptoFactory
from src.core.crypto.hmac_signer import HMACSigner

__all__ = [
    "Base64Encryptor",
    "CryptoFactory",
    "DecryptionError",
    "Encryptor",
    "HMACSigner",
    "Signer",
]
