"""Security package of DocSeal: file-at-rest encryption core.

This package provides:
- master key loading/validation from an injected configuration provider
- PBKDF2-HMAC-SHA256 per-file subkey derivation
- one-shot AES-256-GCM encryption/decryption of whole buffers
- the fixed ``salt || nonce || tag || ciphertext`` blob format

The module-level helpers below use a lazily created default service that reads
the master key from the ``ENCRYPTION_KEY`` environment variable. Applications
that need another key source should build their own FileEncryptionService.
"""

from typing import Optional

from .kdf import generate_salt, derive_key
from .master_key import MasterKeySource, generate_master_key_hex
from .blob_format import (
    EncryptedBlob,
    HEADER_BYTES,
    NONCE_BYTES,
    SALT_BYTES,
    TAG_BYTES,
    is_encrypted,
    pack_blob,
    unpack_blob,
)
from .guard import SizeGuard
from .events import CryptoEvent, log_event
from .encryption import FileEncryptionService

_default_service: Optional[FileEncryptionService] = None


def get_service() -> FileEncryptionService:
    global _default_service
    if _default_service is None:
        _default_service = FileEncryptionService()
    return _default_service


def encrypt_bytes(plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
    return get_service().encrypt(plaintext, associated_data)


def decrypt_bytes(blob: bytes, associated_data: Optional[bytes] = None) -> bytes:
    return get_service().decrypt(blob, associated_data)


def get_master_key() -> bytes:
    return get_service().key_source.get_master_key()


__all__ = [
    "generate_salt",
    "derive_key",
    "MasterKeySource",
    "generate_master_key_hex",
    "EncryptedBlob",
    "HEADER_BYTES",
    "NONCE_BYTES",
    "SALT_BYTES",
    "TAG_BYTES",
    "is_encrypted",
    "pack_blob",
    "unpack_blob",
    "SizeGuard",
    "CryptoEvent",
    "log_event",
    "FileEncryptionService",
    "get_service",
    "encrypt_bytes",
    "decrypt_bytes",
    "get_master_key",
]
