"""Input checks that run before any key material or randomness is touched."""
from __future__ import annotations

from docseal.core.config import DEFAULT_MAX_FILE_SIZE
from docseal.core.exceptions import ValidationError, ValidationReason

BYTES_LIKE = (bytes, bytearray, memoryview)


def require_bytes(data, label: str = "input") -> bytes:
    if not isinstance(data, BYTES_LIKE):
        raise ValidationError(
            ValidationReason.NOT_BYTES,
            f"{label} must be bytes-like, got {type(data).__name__}",
        )
    return bytes(data)


class SizeGuard:
    def __init__(self, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.max_file_size = max_file_size

    def check(self, plaintext) -> bytes:
        """Return ``plaintext`` as bytes or raise ValidationError."""
        data = require_bytes(plaintext, "plaintext")
        if not data:
            raise ValidationError(ValidationReason.EMPTY_INPUT, "cannot encrypt empty input")
        if len(data) > self.max_file_size:
            raise ValidationError(
                ValidationReason.TOO_LARGE,
                f"input too large: {len(data)} bytes, max {self.max_file_size} bytes",
            )
        return data
