"""
Exceptions for DocSeal
Every failure the encryption core can report derives from DocSealError and
carries an ErrorKind, so callers can branch on the kind instead of messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    # what went wrong, mapped by the embedding app to user-visible behaviour
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    FORMAT = "format"
    AUTHENTICATION = "authentication"
    DERIVATION = "derivation"
    ENCRYPTION = "encryption"
    DECRYPTION = "decryption"


class ValidationReason(Enum):
    EMPTY_INPUT = "empty_input"
    TOO_LARGE = "too_large"
    NOT_BYTES = "not_bytes"


class DocSealError(Exception):
    # general container for errors
    kind: ErrorKind


class ConfigurationError(DocSealError):
    # master key missing, non-hex or wrong decoded length (admin-actionable)
    kind = ErrorKind.CONFIGURATION


class ValidationError(DocSealError):
    # input rejected before any crypto work (user-correctable)
    kind = ErrorKind.VALIDATION

    def __init__(self, reason: ValidationReason, message: str):
        # both in args so pickling rebuilds the same error across processes
        super().__init__(reason, message)
        self.reason = reason
        self.message = message

    def __str__(self) -> str:
        return self.message


class FormatError(DocSealError):
    # blob structurally unparseable
    kind = ErrorKind.FORMAT


class AuthenticationError(DocSealError):
    # GCM tag mismatch: tampered, corrupted or encrypted under another key
    kind = ErrorKind.AUTHENTICATION


class DerivationError(DocSealError):
    kind = ErrorKind.DERIVATION


class EncryptionError(DocSealError):
    kind = ErrorKind.ENCRYPTION


class DecryptionError(DocSealError):
    kind = ErrorKind.DECRYPTION


class MasterKeyUnavailableError(ConfigurationError, EncryptionError):
    # encrypt could not load the master key; still admin-actionable
    kind = ErrorKind.CONFIGURATION


@dataclass(frozen=True)
class Result:
    """Outcome of a non-raising operation: either ``value`` or ``error``.

    Returned by ``FileEncryptionService.try_encrypt`` / ``try_decrypt`` so the
    caller has to look at ``kind`` before touching the bytes.
    """

    value: Optional[bytes] = None
    error: Optional[DocSealError] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("Result needs exactly one of value or error")

    @classmethod
    def success(cls, value: bytes) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DocSealError) -> "Result":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> bytes:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value
