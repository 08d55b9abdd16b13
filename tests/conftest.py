"""Shared fixtures: fixed master keys and services built on them."""

import pytest

from docseal.core.config import EncryptionConfig
from docseal.security.encryption import FileEncryptionService

ZERO_KEY_HEX = "00" * 32
OTHER_KEY_HEX = "01" * 32


@pytest.fixture
def events():
    """List that collects CryptoEvents emitted by the service."""
    return []


@pytest.fixture
def service(events):
    """Service keyed with 32 zero bytes, recording events."""
    return FileEncryptionService(EncryptionConfig.from_hex_key(ZERO_KEY_HEX), event_sink=events.append)


@pytest.fixture
def other_service():
    """Service with a different, equally valid master key."""
    return FileEncryptionService(EncryptionConfig.from_hex_key(OTHER_KEY_HEX))
