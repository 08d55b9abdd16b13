"""Structured events emitted once per encrypt/decrypt call.

Events carry the operation name, the input size and the outcome. They never
carry key material, subkeys, plaintext, salts or nonces.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

SUCCESS = "success"


@dataclass(frozen=True)
class CryptoEvent:
    operation: str
    byte_count: int
    outcome: str

    @property
    def ok(self) -> bool:
        return self.outcome == SUCCESS


EventSink = Callable[[CryptoEvent], None]


def log_event(event: CryptoEvent) -> None:
    """Default sink: DEBUG for successes, WARNING for failures."""
    level = logging.DEBUG if event.ok else logging.WARNING
    logger.log(
        level,
        "%s %d bytes: %s",
        event.operation,
        event.byte_count,
        event.outcome,
        extra={"operation": event.operation, "byte_count": event.byte_count, "outcome": event.outcome},
    )
