"""Loading and validating the process-wide master key.

The master key arrives as 64 hex characters through a ConfigProvider. It is
decoded once, checked to be exactly 32 bytes, and cached; the raw value never
appears in log records or exception messages.
"""
from __future__ import annotations

import logging
import os
import string
from typing import Optional

from docseal.core.config import ConfigProvider, DEFAULT_KEY_NAME
from docseal.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

MASTER_KEY_BYTES = 32
MASTER_KEY_HEX_CHARS = MASTER_KEY_BYTES * 2


def generate_master_key_hex() -> str:
    """Return a fresh 256-bit master key as 64 hex characters."""
    return os.urandom(MASTER_KEY_BYTES).hex()


def parse_master_key(value: Optional[str], key_name: str = DEFAULT_KEY_NAME) -> bytes:
    """Decode a hex master key setting, raising ConfigurationError if unusable."""
    if value is None or not value.strip():
        raise ConfigurationError(
            f"{key_name} is not configured; expected {MASTER_KEY_HEX_CHARS} hex characters "
            "(generate one with `docseal generate-key`)"
        )

    value = value.strip()
    if not all(c in string.hexdigits for c in value):
        raise ConfigurationError(f"{key_name} is not valid hex")
    if len(value) % 2:
        raise ConfigurationError(f"{key_name} has an odd number of hex characters")

    key = bytes.fromhex(value)
    if len(key) != MASTER_KEY_BYTES:
        raise ConfigurationError(
            f"{key_name} decodes to {len(key)} bytes; expected {MASTER_KEY_BYTES} "
            f"({MASTER_KEY_HEX_CHARS} hex characters)"
        )
    return key


class MasterKeySource:
    def __init__(self, provider: ConfigProvider, key_name: str = DEFAULT_KEY_NAME):
        self.provider = provider
        self.key_name = key_name
        self._cached: Optional[bytes] = None

    def get_master_key(self) -> bytes:
        # Two threads racing here both decode the same value; last write wins.
        if self._cached is None:
            self._cached = parse_master_key(
                self.provider.get_config_value(self.key_name), self.key_name
            )
            logger.debug("master key loaded from %s", self.key_name)
        return self._cached
