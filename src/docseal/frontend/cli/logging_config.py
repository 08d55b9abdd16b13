"""Lightweight logging setup for the command line."""

import logging
import sys


def configure_logging(verbose: bool = False) -> None:
    # Configure root logger once; keep output simple for terminals.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
