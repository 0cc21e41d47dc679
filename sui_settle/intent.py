"""
Intent scope for transaction signatures.

A signature covers ``intent || tx_bytes``, never the bare transaction
bytes. The 3-byte intent (scope, version, app id) is the domain
separator: changing it invalidates every existing signature, so it
lives here as a named constant and is injected into the settler rather
than spelled out at call sites.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

# Intent scopes
SCOPE_TRANSACTION_DATA = 0
SCOPE_PERSONAL_MESSAGE = 3

# Intent versions
INTENT_VERSION_V0 = 0

# App ids
APP_ID_SUI = 0


@dataclass(frozen=True)
class Intent:
    """Signature domain separator."""

    scope: int
    version: int = INTENT_VERSION_V0
    app_id: int = APP_ID_SUI

    def __post_init__(self) -> None:
        for name in ("scope", "version", "app_id"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} must fit in one byte, got: {value}")

    def to_bytes(self) -> bytes:
        return bytes((self.scope, self.version, self.app_id))


# The scope every transaction signature is made under.
SUI_TRANSACTION_INTENT = Intent(scope=SCOPE_TRANSACTION_DATA)


def intent_message(intent: Intent, tx_bytes: bytes) -> bytes:
    """Bytes covered by the signature: intent prefix then transaction bytes."""
    return intent.to_bytes() + tx_bytes


def intent_digest(intent: Intent, tx_bytes: bytes) -> bytes:
    """Blake2b-256 of the intent message (what Ed25519 actually signs)."""
    return hashlib.blake2b(intent_message(intent, tx_bytes), digest_size=32).digest()
