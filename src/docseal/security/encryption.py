"""
File-at-rest encryption service for DocSeal.

FileEncryptionService turns plaintext buffers into self-contained blobs and
back. Every blob gets its own random salt, so each file is encrypted under a
different subkey even though all of them hang off one master key:

    subkey = PBKDF2-HMAC-SHA256(master_key, salt, 100_000 iterations)
    blob   = salt || nonce || tag || AES-256-GCM(subkey, nonce, plaintext)

Both directions are synchronous and CPU-bound (the KDF is slow on purpose), so
UI callers should run them on a worker thread. The service keeps no mutable
state apart from the cached master key and is safe to share between threads.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from docseal.core.config import EncryptionConfig
from docseal.core.exceptions import (
    AuthenticationError,
    DecryptionError,
    ConfigurationError,
    DocSealError,
    EncryptionError,
    MasterKeyUnavailableError,
    Result,
)
from .blob_format import NONCE_BYTES, SALT_BYTES, TAG_BYTES, pack_blob, unpack_blob
from .events import SUCCESS, CryptoEvent, EventSink, log_event
from .guard import SizeGuard, require_bytes
from .kdf import derive_key
from .master_key import MasterKeySource

logger = logging.getLogger(__name__)


def _random_bytes(length: int) -> bytes:
    # os.urandom is the OS CSPRNG; there is no weaker fallback.
    try:
        return os.urandom(length)
    except NotImplementedError as e:
        raise EncryptionError("no secure random source available") from e


def _byte_count(data) -> int:
    # memoryview len() counts items, not bytes
    if isinstance(data, memoryview):
        return data.nbytes
    if isinstance(data, (bytes, bytearray)):
        return len(data)
    return 0


class FileEncryptionService:
    """
    Encrypt and decrypt whole files held in memory.

    The service knows nothing about filenames, paths or database ids; callers
    hand it bytes and store whatever comes back.

    ``associated_data`` (optional on both calls) is authenticated but not
    stored. Passing e.g. a document id binds the blob to that document: the
    same value must be supplied to decrypt, and a blob moved to another
    document fails authentication.
    """

    def __init__(
        self,
        config: Optional[EncryptionConfig] = None,
        event_sink: Optional[EventSink] = None,
    ):
        self.config = config if config is not None else EncryptionConfig.from_env()
        self.key_source = MasterKeySource(self.config.provider, self.config.key_name)
        self.guard = SizeGuard(self.config.max_file_size)
        self.event_sink: EventSink = event_sink if event_sink is not None else log_event

    # ------------------------------------------------------------------
    # Raising API
    # ------------------------------------------------------------------

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        """
        Encrypt ``plaintext`` and return ``salt || nonce || tag || ciphertext``.

        The output is always ``44 + len(plaintext)`` bytes. Input checks run
        before the master key is loaded or any randomness is drawn.
        """
        size = _byte_count(plaintext)
        try:
            blob = self._encrypt(plaintext, associated_data)
        except DocSealError as e:
            self._emit("encrypt", size, e.kind.value)
            raise
        self._emit("encrypt", size, SUCCESS)
        return blob

    def decrypt(self, blob: bytes, associated_data: Optional[bytes] = None) -> bytes:
        """
        Verify and decrypt a blob produced by :meth:`encrypt`.

        Raises FormatError for blobs too short to hold a header and ciphertext,
        and AuthenticationError when the tag does not verify (tampering,
        corruption, wrong master key or wrong associated data).
        """
        size = _byte_count(blob)
        try:
            plaintext = self._decrypt(blob, associated_data)
        except DocSealError as e:
            self._emit("decrypt", size, e.kind.value)
            raise
        self._emit("decrypt", size, SUCCESS)
        return plaintext

    # ------------------------------------------------------------------
    # Result API
    # ------------------------------------------------------------------

    def try_encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> Result:
        try:
            return Result.success(self.encrypt(plaintext, associated_data))
        except DocSealError as e:
            return Result.failure(e)

    def try_decrypt(self, blob: bytes, associated_data: Optional[bytes] = None) -> Result:
        try:
            return Result.success(self.decrypt(blob, associated_data))
        except DocSealError as e:
            return Result.failure(e)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _encrypt(self, plaintext, associated_data) -> bytes:
        data = self.guard.check(plaintext)
        aad = self._check_aad(associated_data)

        try:
            master_key = self.key_source.get_master_key()
        except ConfigurationError as e:
            raise MasterKeyUnavailableError(f"encryption failed: {e}") from e
        salt = _random_bytes(SALT_BYTES)
        nonce = _random_bytes(NONCE_BYTES)
        subkey = derive_key(master_key, salt)

        try:
            sealed = AESGCM(subkey).encrypt(nonce, data, aad)
        except Exception as e:
            raise EncryptionError(f"encryption failed: {type(e).__name__}") from e

        # cryptography appends the tag to the ciphertext
        ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return pack_blob(salt, nonce, tag, ciphertext)

    def _decrypt(self, blob, associated_data) -> bytes:
        parts = unpack_blob(require_bytes(blob, "encrypted data"))
        aad = self._check_aad(associated_data)

        master_key = self.key_source.get_master_key()
        subkey = derive_key(master_key, parts.salt)

        try:
            return AESGCM(subkey).decrypt(parts.nonce, parts.ciphertext + parts.tag, aad)
        except InvalidTag as e:
            raise AuthenticationError(
                "authentication failed: data is corrupted, tampered with, or was encrypted under a different key"
            ) from e
        except Exception as e:
            raise DecryptionError(f"decryption failed: {type(e).__name__}") from e

    @staticmethod
    def _check_aad(associated_data) -> Optional[bytes]:
        if associated_data is None:
            return None
        return require_bytes(associated_data, "associated data")

    def _emit(self, operation: str, byte_count: int, outcome: str) -> None:
        try:
            self.event_sink(CryptoEvent(operation, byte_count, outcome))
        except Exception:
            logger.exception("event sink failed for %s", operation)
