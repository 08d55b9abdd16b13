"""
Configuration for the encryption core.

The service never reads process-wide state on its own; it receives an
EncryptionConfig at construction. The config only says *where* the master key
comes from (a provider plus a setting name) and how large a plaintext may be.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence

DEFAULT_KEY_NAME = "ENCRYPTION_KEY"
DEFAULT_MAX_FILE_SIZE = 500 * 1024 * 1024  # 500 MiB, whole file held in memory


class ConfigProvider(Protocol):
    def get_config_value(self, name: str) -> Optional[str]:
        ...


class EnvConfigProvider:
    """Reads settings from the process environment (or an injected mapping)."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def get_config_value(self, name: str) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(name)


class MappingConfigProvider:
    """Fixed settings supplied by the embedding application."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    def get_config_value(self, name: str) -> Optional[str]:
        return self._values.get(name)


class ChainConfigProvider:
    """Asks each provider in order and returns the first non-empty value."""

    def __init__(self, providers: Sequence[ConfigProvider]):
        self.providers = list(providers)

    def get_config_value(self, name: str) -> Optional[str]:
        for provider in self.providers:
            value = provider.get_config_value(name)
            if value and value.strip():
                return value
        return None


@dataclass(frozen=True)
class EncryptionConfig:
    provider: ConfigProvider = field(default_factory=EnvConfigProvider)
    key_name: str = DEFAULT_KEY_NAME
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    def __post_init__(self):
        if self.max_file_size <= 0:
            raise ValueError("max_file_size must be positive")

    @classmethod
    def from_env(
        cls,
        key_name: str = DEFAULT_KEY_NAME,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> "EncryptionConfig":
        return cls(
            provider=EnvConfigProvider(),
            key_name=key_name,
            max_file_size=max_file_size,
        )

    @classmethod
    def from_hex_key(
        cls,
        key_hex: str,
        key_name: str = DEFAULT_KEY_NAME,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> "EncryptionConfig":
        """Config with the master key given directly (tests, embedding)."""
        return cls(
            provider=MappingConfigProvider({key_name: key_hex}),
            key_name=key_name,
            max_file_size=max_file_size,
        )
