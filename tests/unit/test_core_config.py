"""Unit tests for configuration objects and providers."""

import pytest
from docseal.core.config import (
    DEFAULT_KEY_NAME,
    DEFAULT_MAX_FILE_SIZE,
    ChainConfigProvider,
    EncryptionConfig,
    EnvConfigProvider,
    MappingConfigProvider,
)


def test_env_provider_reads_process_environment(monkeypatch):
    monkeypatch.setenv("DOCSEAL_TEST_SETTING", "value")
    assert EnvConfigProvider().get_config_value("DOCSEAL_TEST_SETTING") == "value"


def test_env_provider_missing_returns_none(monkeypatch):
    monkeypatch.delenv("DOCSEAL_TEST_SETTING", raising=False)
    assert EnvConfigProvider().get_config_value("DOCSEAL_TEST_SETTING") is None


def test_env_provider_with_injected_mapping(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_KEY", "from-process")
    provider = EnvConfigProvider({"ENCRYPTION_KEY": "from-mapping"})
    assert provider.get_config_value("ENCRYPTION_KEY") == "from-mapping"


def test_mapping_provider_copies_values():
    values = {"A": "1"}
    provider = MappingConfigProvider(values)
    values["A"] = "2"
    assert provider.get_config_value("A") == "1"
    assert provider.get_config_value("B") is None


def test_chain_provider_first_non_empty_wins():
    chain = ChainConfigProvider([
        MappingConfigProvider({"A": ""}),
        MappingConfigProvider({"A": "second", "B": "b"}),
        MappingConfigProvider({"A": "third"}),
    ])
    assert chain.get_config_value("A") == "second"
    assert chain.get_config_value("B") == "b"
    assert chain.get_config_value("C") is None


def test_chain_provider_skips_whitespace_only_values():
    chain = ChainConfigProvider([
        MappingConfigProvider({"A": "  \n"}),
        MappingConfigProvider({"A": "second"}),
    ])
    assert chain.get_config_value("A") == "second"
    assert ChainConfigProvider([MappingConfigProvider({"A": "\t"})]).get_config_value("A") is None


def test_encryption_config_defaults():
    config = EncryptionConfig()
    assert config.key_name == DEFAULT_KEY_NAME == "ENCRYPTION_KEY"
    assert config.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert isinstance(config.provider, EnvConfigProvider)


def test_encryption_config_from_hex_key():
    config = EncryptionConfig.from_hex_key("ab" * 32, key_name="K", max_file_size=10)
    assert config.provider.get_config_value("K") == "ab" * 32
    assert config.max_file_size == 10


def test_encryption_config_from_env(monkeypatch):
    monkeypatch.setenv("OTHER_KEY", "cd" * 32)
    config = EncryptionConfig.from_env(key_name="OTHER_KEY")
    assert config.provider.get_config_value(config.key_name) == "cd" * 32


@pytest.mark.parametrize("size", [0, -1])
def test_encryption_config_rejects_non_positive_max(size):
    with pytest.raises(ValueError, match="max_file_size"):
        EncryptionConfig(max_file_size=size)
