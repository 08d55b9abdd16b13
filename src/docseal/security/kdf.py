"""Per-file key derivation for DocSeal."""
import os
from typing import Dict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from docseal.core.exceptions import DerivationError

PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16
KEY_BYTES = 32


def generate_salt(length: int = SALT_BYTES) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def derive_key(
    master_key: bytes,
    salt: bytes,
    iterations: int = PBKDF2_ITERATIONS,
    key_len: int = KEY_BYTES,
) -> bytes:
    """
    Derive a per-file subkey from the master key and a salt using
    PBKDF2-HMAC-SHA256. Same (master_key, salt) always yields the same subkey,
    which is what lets decryption rebuild it from the salt stored in the blob.
    """
    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=key_len,
            salt=bytes(salt),
            iterations=iterations,
        )
        return kdf.derive(bytes(master_key))
    except Exception as e:
        raise DerivationError(f"key derivation failed: {type(e).__name__}") from e


def kdf_params_to_dict(salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> Dict:
    return {
        "algo": "pbkdf2-hmac-sha256",
        "salt": salt.hex(),
        "iterations": iterations,
        "length": KEY_BYTES,
    }
