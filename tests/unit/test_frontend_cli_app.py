"""Unit tests for the DocSeal command line."""

import pytest
from unittest.mock import patch

from docseal.frontend.cli.app import _human_size, main

KEY_HEX = "00" * 32


@pytest.fixture
def key_env(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_KEY", KEY_HEX)


@pytest.fixture
def no_key_env(monkeypatch):
    monkeypatch.delenv("ENCRYPTION_KEY", raising=False)


# --- Utility functions ---

def test_human_size_formatting():
    """Test the human readable size formatter."""
    assert _human_size(100) == "100 B"
    assert _human_size(1024) == "1.0 KB"
    assert _human_size(1024 * 1024 * 2.5) == "2.5 MB"
    assert _human_size(1024 * 1024 * 1024) == "1.0 GB"


# --- Commands ---

def test_generate_key_prints_hex(capsys):
    assert main(["generate-key"]) == 0
    out = capsys.readouterr().out.strip()
    assert len(out) == 64
    bytes.fromhex(out)


def test_encrypt_then_decrypt(tmp_path, key_env):
    src = tmp_path / "offer.txt"
    enc = tmp_path / "offer.enc"
    dec = tmp_path / "offer.out"
    src.write_bytes(b"salary: confidential")

    assert main(["encrypt", str(src), str(enc), "--aad", "doc-1"]) == 0
    assert len(enc.read_bytes()) == 44 + 20
    assert main(["decrypt", str(enc), str(dec), "--aad", "doc-1"]) == 0
    assert dec.read_bytes() == b"salary: confidential"


def test_decrypt_wrong_aad_exit_code(tmp_path, key_env):
    src = tmp_path / "a.txt"
    enc = tmp_path / "a.enc"
    src.write_bytes(b"abc")
    main(["encrypt", str(src), str(enc), "--aad", "doc-1"])

    assert main(["decrypt", str(enc), str(tmp_path / "a.out"), "--aad", "doc-2"]) == 5


def test_missing_key_exit_code(tmp_path, no_key_env):
    src = tmp_path / "a.txt"
    src.write_bytes(b"abc")
    assert main(["encrypt", str(src), str(tmp_path / "a.enc")]) == 2


def test_custom_key_name(tmp_path, monkeypatch, no_key_env):
    monkeypatch.setenv("CRM_FILE_KEY", KEY_HEX)
    src = tmp_path / "a.txt"
    src.write_bytes(b"abc")
    assert main(["--key-name", "CRM_FILE_KEY", "encrypt", str(src), str(tmp_path / "a.enc")]) == 0


def test_empty_file_exit_code(tmp_path, key_env):
    src = tmp_path / "empty.txt"
    src.write_bytes(b"")
    assert main(["encrypt", str(src), str(tmp_path / "e.enc")]) == 3


def test_short_file_exit_code(tmp_path, key_env):
    enc = tmp_path / "short.enc"
    enc.write_bytes(b"\x00" * 10)
    assert main(["decrypt", str(enc), str(tmp_path / "x")]) == 4


def test_missing_source_file_exit_code(tmp_path, key_env):
    assert main(["encrypt", str(tmp_path / "nope"), str(tmp_path / "x")]) == 1


def test_keyring_fallback(tmp_path, no_key_env):
    src = tmp_path / "a.txt"
    src.write_bytes(b"abc")
    with patch("docseal.security.keystore.keyring", autospec=True) as mock_lib:
        mock_lib.get_password.return_value = KEY_HEX
        code = main(["--keyring-service", "crm", "encrypt", str(src), str(tmp_path / "a.enc")])

    assert code == 0
    mock_lib.get_password.assert_called_once_with("crm", "ENCRYPTION_KEY")


def test_inspect(tmp_path, key_env, capsys):
    src = tmp_path / "a.txt"
    enc = tmp_path / "a.enc"
    src.write_bytes(b"x" * 2048)
    main(["encrypt", str(src), str(enc)])
    capsys.readouterr()

    assert main(["inspect", str(enc)]) == 0
    out = capsys.readouterr().out
    assert "ciphertext: 2.0 KB" in out
    assert "pbkdf2-hmac-sha256, 100000 iterations" in out


def test_inspect_rejects_non_blob(tmp_path):
    path = tmp_path / "plain.txt"
    path.write_bytes(b"hi")
    assert main(["inspect", str(path)]) == 4


# --- Keystore commands ---

@pytest.fixture
def mock_keystore_keyring():
    with patch("docseal.security.keystore.keyring", autospec=True) as mock_lib:
        yield mock_lib


def test_generate_key_save_refuses_insecure_backend(mock_keystore_keyring, capsys):
    mock_keystore_keyring.get_keyring.return_value = type("PlaintextKeyring", (), {"priority": 1})()

    assert main(["generate-key", "--save"]) == 2
    mock_keystore_keyring.set_password.assert_not_called()
    # the key is never printed when saving
    assert capsys.readouterr().out == ""


def test_generate_key_save_with_force(mock_keystore_keyring):
    mock_keystore_keyring.get_keyring.return_value = type("PlaintextKeyring", (), {"priority": 1})()

    assert main(["--keyring-service", "crm", "generate-key", "--save", "--force"]) == 0
    service, account, secret = mock_keystore_keyring.set_password.call_args[0]
    assert (service, account) == ("crm", "ENCRYPTION_KEY")
    assert len(bytes.fromhex(secret)) == 32


def test_generate_key_save_secure_backend(mock_keystore_keyring):
    mock_keystore_keyring.get_keyring.return_value = type("SecretServiceKeyring", (), {"priority": 5})()

    assert main(["generate-key", "--save"]) == 0
    assert mock_keystore_keyring.set_password.call_args[0][0] == "docseal"


def test_delete_key(mock_keystore_keyring):
    assert main(["--keyring-service", "crm", "delete-key"]) == 0
    mock_keystore_keyring.delete_password.assert_called_once_with("crm", "ENCRYPTION_KEY")
