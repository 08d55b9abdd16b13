"""
Path-level helpers around FileEncryptionService.

The encryption core only sees bytes; these helpers read a whole file, run it
through the service and write the result next to the destination under a
temporary name before renaming it into place. A failed call leaves no output
file behind.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from ..security.encryption import FileEncryptionService


def _write_atomic(destination: Path, data: bytes) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def encrypt_path(
    source_path,
    destination_path,
    service: FileEncryptionService,
    associated_data: Optional[bytes] = None,
) -> int:
    """Encrypt ``source_path`` into ``destination_path``; returns bytes written."""
    src = Path(source_path).expanduser()
    blob = service.encrypt(src.read_bytes(), associated_data)
    _write_atomic(Path(destination_path).expanduser(), blob)
    return len(blob)


def decrypt_path(
    source_path,
    destination_path,
    service: FileEncryptionService,
    associated_data: Optional[bytes] = None,
) -> int:
    """Decrypt ``source_path`` into ``destination_path``; returns bytes written."""
    src = Path(source_path).expanduser()
    plaintext = service.decrypt(src.read_bytes(), associated_data)
    _write_atomic(Path(destination_path).expanduser(), plaintext)
    return len(plaintext)
