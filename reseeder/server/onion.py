"""
Tor v3 onion service key helpers.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

SEED_SIZE = 32
ONION_VERSION = b"\x03"
CHECKSUM_PREFIX = b".onion checksum"


def generate_seed() -> bytes:
    """Generate a fresh Ed25519 private key seed."""
    return Ed25519PrivateKey.generate().private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_from_seed(seed: bytes) -> bytes:
    """Return the raw Ed25519 public key for a 32-byte seed."""
    return (
        Ed25519PrivateKey.from_private_bytes(seed)
        .public_key()
        .public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
    )


def service_id_from_seed(seed: bytes) -> str:
    """Derive the 56 character v3 onion service ID from a private key seed.

    The ID encodes the public key, a two byte checksum and the version byte,
    so it identifies the key without revealing it.
    """
    pub = public_key_from_seed(seed)
    checksum = hashlib.sha3_256(CHECKSUM_PREFIX + pub + ONION_VERSION).digest()[:2]
    return base64.b32encode(pub + checksum + ONION_VERSION).decode("ascii").lower()


def expanded_secret_key(seed: bytes) -> bytes:
    """Return the 64-byte expanded secret key Tor stores for ED25519-V3."""
    digest = bytearray(hashlib.sha512(seed).digest())
    digest[0] &= 248
    digest[31] &= 127
    digest[31] |= 64
    return bytes(digest)


def tor_key_blob(seed: bytes) -> str:
    """Return the ``key_content`` value for an ADD_ONION ED25519-V3 request."""
    return base64.b64encode(expanded_secret_key(seed)).decode("ascii")
