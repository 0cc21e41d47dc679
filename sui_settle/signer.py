"""
Signer protocol — the secrets boundary.

The settler never sees private keys. It hands over transaction bytes,
the sender address and the intent scope, and gets back a serialized
signature (base64 of ``flag || signature || public key``) ready to be
attached to the submission.

Concrete implementations:
    - Ed25519Keystore (in-memory keys, ``cryptography``)
    - FakeSigner (tests)

Keystore file formats are not handled here; load key bytes however
your deployment does and pass them to ``Ed25519Keystore.from_private_bytes``.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Iterable, Protocol, runtime_checkable

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from sui_settle.intent import Intent, intent_digest
from sui_settle.type_tag import normalize_address

logger = logging.getLogger(__name__)

# Signature scheme flag prefixed to public keys and serialized signatures.
ED25519_FLAG = 0x00


class UnknownSignerAddress(LookupError):
    """The keystore holds no key for the requested address."""


@runtime_checkable
class Signer(Protocol):
    """Interface for transaction signing.

    Implementations manage key material internally.
    """

    def sign_secure(self, address: str, tx_bytes: bytes, intent: Intent) -> str:
        """Sign ``tx_bytes`` for ``address`` under ``intent``.

        Returns:
            Serialized signature (base64).

        Raises:
            UnknownSignerAddress: If no key is held for ``address``.
        """
        ...


def _public_key_bytes(key: Ed25519PrivateKey) -> bytes:
    return key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


def ed25519_address(public_key: bytes) -> str:
    """Derive the account address of an Ed25519 public key."""
    digest = hashlib.blake2b(bytes((ED25519_FLAG,)) + public_key, digest_size=32)
    return "0x" + digest.hexdigest()


class Ed25519Keystore:
    """In-memory Ed25519 keystore implementing the Signer protocol.

    Args:
        keys: Private keys to load. More can be added with ``add_key()``.
    """

    def __init__(self, keys: Iterable[Ed25519PrivateKey] = ()) -> None:
        self._keys: dict[str, Ed25519PrivateKey] = {}
        for key in keys:
            self.add_key(key)

    @classmethod
    def from_private_bytes(cls, *secrets: bytes) -> Ed25519Keystore:
        """Build a keystore from raw 32-byte Ed25519 seeds."""
        return cls(Ed25519PrivateKey.from_private_bytes(s) for s in secrets)

    @classmethod
    def generate(cls, count: int = 1) -> Ed25519Keystore:
        """Build a keystore with ``count`` fresh random keys."""
        return cls(Ed25519PrivateKey.generate() for _ in range(count))

    def add_key(self, key: Ed25519PrivateKey) -> str:
        """Add a key and return its address."""
        address = ed25519_address(_public_key_bytes(key))
        self._keys[address] = key
        logger.debug("Loaded Ed25519 key for %s", address)
        return address

    @property
    def addresses(self) -> list[str]:
        return list(self._keys)

    def public_key(self, address: str) -> bytes:
        return _public_key_bytes(self._key_for(address))

    def sign_secure(self, address: str, tx_bytes: bytes, intent: Intent) -> str:
        key = self._key_for(address)
        signature = key.sign(intent_digest(intent, tx_bytes))
        serialized = bytes((ED25519_FLAG,)) + signature + _public_key_bytes(key)
        return base64.b64encode(serialized).decode("ascii")

    def _key_for(self, address: str) -> Ed25519PrivateKey:
        try:
            return self._keys[normalize_address(address)]
        except (KeyError, ValueError) as exc:
            raise UnknownSignerAddress(f"no key for address {address}") from exc
