"""OS keystore integration using keyring as a source for the master key.

KeyringConfigProvider plugs the OS keystore into the ConfigProvider seam so the
master key can live there instead of in an environment variable. The key is
stored as the same 64-hex-character string the environment would carry. Do
not assume keyring provides hardware-backed security on all platforms.
"""
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from docseal.core.config import DEFAULT_KEY_NAME
from docseal.core.exceptions import ConfigurationError

DEFAULT_SERVICE = "docseal"


def save_master_key(key_bytes: bytes, service: str = DEFAULT_SERVICE, account: str = DEFAULT_KEY_NAME) -> None:
    """Persist a raw master key in the OS keystore under (service, account) as hex."""
    try:
        keyring.set_password(service, account, bytes(key_bytes).hex())
    except KeyringError as e:
        raise ConfigurationError(f"failed to store {account} in keyring service '{service}'") from e


def delete_master_key(service: str = DEFAULT_SERVICE, account: str = DEFAULT_KEY_NAME) -> None:
    """Remove the stored master key. Missing entries are not an error."""
    try:
        keyring.delete_password(service, account)
    except PasswordDeleteError:
        pass
    except KeyringError as e:
        raise ConfigurationError(f"failed to delete {account} from keyring service '{service}'") from e


def assess_keyring_backend() -> tuple[bool, str]:
    """Return (is_secure, message) describing the current keyring backend.

    Heuristics are used because the `keyring` package exposes different backends
    across platforms.
    """
    try:
        backend = keyring.get_keyring()
    except Exception as e:
        return False, f"failed to get keyring backend: {e}"

    name = backend.__class__.__name__
    priority = getattr(backend, "priority", None)

    insecure_indicators = ("Plaintext", "Uncrypted", "Simple", "File", "Null", "Fail")
    if any(tok in name for tok in insecure_indicators):
        return False, f"insecure backend detected: {name}"

    if priority is not None and priority <= 0:
        return False, f"no suitable secure keyring backend available (priority={priority}, backend={name})"

    # treat known platform backends as acceptable
    if "Win" in name or "Keychain" in name or "SecretService" in name or "KWallet" in name:
        return True, f"backend looks acceptable: {name} (priority={priority})"

    return True, f"unknown backend '{name}', treat with caution (priority={priority})"


class KeyringConfigProvider:
    """ConfigProvider that answers setting names from the OS keystore."""

    def __init__(self, service: str = DEFAULT_SERVICE):
        self.service = service

    def get_config_value(self, name: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service, name)
        except KeyringError as e:
            raise ConfigurationError(f"failed to read {name} from keyring service '{self.service}'") from e
