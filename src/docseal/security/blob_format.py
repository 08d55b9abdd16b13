"""Binary layout of an encrypted blob.

Layout (raw concatenation, every header field fixed-width):
- 16 bytes: PBKDF2 salt
- 12 bytes: AES-GCM nonce
- 16 bytes: AES-GCM authentication tag
- rest:     ciphertext (same length as the plaintext)

No length prefixes: the header widths are constants and the ciphertext always
takes the remainder. Both directions go through this module so the offsets
cannot drift apart.
"""
from __future__ import annotations

from dataclasses import dataclass

from docseal.core.exceptions import FormatError

SALT_BYTES = 16
NONCE_BYTES = 12
TAG_BYTES = 16
HEADER_BYTES = SALT_BYTES + NONCE_BYTES + TAG_BYTES

_SALT_END = SALT_BYTES
_NONCE_END = _SALT_END + NONCE_BYTES
_TAG_END = _NONCE_END + TAG_BYTES


@dataclass(frozen=True)
class EncryptedBlob:
    salt: bytes
    nonce: bytes
    tag: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        return self.salt + self.nonce + self.tag + self.ciphertext

    def __len__(self) -> int:
        return HEADER_BYTES + len(self.ciphertext)


def pack_blob(salt: bytes, nonce: bytes, tag: bytes, ciphertext: bytes) -> bytes:
    """Assemble ``salt || nonce || tag || ciphertext`` after checking widths."""
    for label, value, width in (
        ("salt", salt, SALT_BYTES),
        ("nonce", nonce, NONCE_BYTES),
        ("tag", tag, TAG_BYTES),
    ):
        if len(value) != width:
            raise FormatError(f"{label} must be {width} bytes, got {len(value)}")
    if not ciphertext:
        raise FormatError("ciphertext is empty")
    return EncryptedBlob(bytes(salt), bytes(nonce), bytes(tag), bytes(ciphertext)).to_bytes()


def unpack_blob(blob: bytes) -> EncryptedBlob:
    """Split a blob into its fields.

    Blobs shorter than the header raise ``FormatError("too short")``. A blob of
    exactly the header length carries no ciphertext, which encryption never
    produces, so it is rejected as well.
    """
    if len(blob) < HEADER_BYTES:
        raise FormatError(f"encrypted data too short ({len(blob)} bytes, min {HEADER_BYTES + 1})")
    if len(blob) == HEADER_BYTES:
        raise FormatError("encrypted data has no ciphertext")

    data = bytes(blob)
    return EncryptedBlob(
        salt=data[:_SALT_END],
        nonce=data[_SALT_END:_NONCE_END],
        tag=data[_NONCE_END:_TAG_END],
        ciphertext=data[_TAG_END:],
    )


def is_encrypted(data) -> bool:
    """Cheap structural check: could ``data`` be a blob produced by encryption?

    This only looks at type and length; it cannot tell ciphertext apart from
    any other binary content of the same size.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        return False
    return len(data) > HEADER_BYTES
