"""
Admin command line for DocSeal.

    docseal generate-key [--save]
    docseal delete-key
    docseal encrypt report.pdf report.pdf.enc --aad doc-42
    docseal decrypt report.pdf.enc report.pdf --aad doc-42
    docseal inspect report.pdf.enc

The master key is read from the ``ENCRYPTION_KEY`` environment variable (or the
name given with --key-name), falling back to the OS keystore when
--keyring-service is set.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from docseal.core.config import ChainConfigProvider, EncryptionConfig, EnvConfigProvider, DEFAULT_KEY_NAME
from docseal.core.exceptions import ConfigurationError, DocSealError, ErrorKind
from docseal.core.files import decrypt_path, encrypt_path
from docseal.frontend.cli.logging_config import configure_logging
from docseal.security.blob_format import HEADER_BYTES, unpack_blob
from docseal.security.encryption import FileEncryptionService
from docseal.security import keystore
from docseal.security.kdf import kdf_params_to_dict
from docseal.security.master_key import generate_master_key_hex

logger = logging.getLogger(__name__)

EXIT_CODES = {
    ErrorKind.CONFIGURATION: 2,
    ErrorKind.VALIDATION: 3,
    ErrorKind.FORMAT: 4,
    ErrorKind.AUTHENTICATION: 5,
}


def _human_size(num: float) -> str:
    # Simple human-readable bytes formatter.
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if num < 1024:
            return f"{num:.1f} {unit}" if unit != "B" else f"{num} B"
        num /= 1024
    return f"{num:.1f} PB"


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docseal",
        description="Encrypt and decrypt files at rest with AES-256-GCM.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--key-name",
        default=DEFAULT_KEY_NAME,
        help=f"Setting that holds the hex master key (default: {DEFAULT_KEY_NAME})",
    )
    parser.add_argument(
        "--keyring-service",
        default=None,
        help="Also look the master key up in the OS keystore under this service",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("generate-key", help="Print a new random 64-hex-character master key")
    p.add_argument(
        "--save",
        action="store_true",
        help="Store the key in the OS keystore (--keyring-service, default 'docseal') instead of printing it",
    )
    p.add_argument("--force", action="store_true", help="Store even if the keyring backend looks insecure")

    sub.add_parser("delete-key", help="Remove the master key from the OS keystore")

    for name, verb in (("encrypt", "Encrypt"), ("decrypt", "Decrypt")):
        p = sub.add_parser(name, help=f"{verb} SOURCE into DESTINATION")
        p.add_argument("source", type=Path)
        p.add_argument("destination", type=Path)
        p.add_argument(
            "--aad",
            default=None,
            help="Associated data (e.g. a document id) bound into the authentication tag",
        )

    p = sub.add_parser("inspect", help="Show the header layout of an encrypted file")
    p.add_argument("path", type=Path)

    return parser


def _build_service(args: argparse.Namespace) -> FileEncryptionService:
    providers = [EnvConfigProvider()]
    if args.keyring_service:
        providers.append(keystore.KeyringConfigProvider(args.keyring_service))
    config = EncryptionConfig(provider=ChainConfigProvider(providers), key_name=args.key_name)
    return FileEncryptionService(config)


def _generate_key(args: argparse.Namespace) -> None:
    key_hex = generate_master_key_hex()
    if not args.save:
        print(key_hex)
        return

    secure, msg = keystore.assess_keyring_backend()
    if not secure and not args.force:
        raise ConfigurationError(f"refusing to store master key in OS keystore: {msg}; pass --force to override")
    service = args.keyring_service or keystore.DEFAULT_SERVICE
    keystore.save_master_key(bytes.fromhex(key_hex), service, args.key_name)
    logger.info("stored new master key as %s in keyring service '%s'", args.key_name, service)


def _inspect(path: Path) -> None:
    parts = unpack_blob(path.read_bytes())
    params = kdf_params_to_dict(parts.salt)
    print(f"file:       {path}")
    print(f"size:       {_human_size(len(parts))}")
    print(f"header:     {HEADER_BYTES} bytes (salt 16, nonce 12, tag 16)")
    print(f"ciphertext: {_human_size(len(parts.ciphertext))}")
    print(f"kdf:        {params['algo']}, {params['iterations']} iterations, {params['length']}-byte key")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "generate-key":
            _generate_key(args)
        elif args.command == "delete-key":
            keystore.delete_master_key(args.keyring_service or keystore.DEFAULT_SERVICE, args.key_name)
        elif args.command == "inspect":
            _inspect(args.path)
        else:
            service = _build_service(args)
            aad = args.aad.encode("utf-8") if args.aad is not None else None
            if args.command == "encrypt":
                written = encrypt_path(args.source, args.destination, service, aad)
            else:
                written = decrypt_path(args.source, args.destination, service, aad)
            logger.info("%sed %s -> %s (%s)", args.command, args.source, args.destination, _human_size(written))
    except DocSealError as e:
        logger.error("%s error: %s", e.kind.value, e)
        return EXIT_CODES.get(e.kind, 1)
    except OSError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
