"""
Nostr key pairs (NIP-19).

Keys are secp256k1: the secret is a 32 byte scalar and the public key is the
32 byte x-coordinate of the derived point. Both are shown to users as Bech32
strings with the human readable prefixes ``npub`` and ``nsec``.
"""
import logging
from typing import NamedTuple, Tuple

import bech32
import coincurve

from .errors import KeyDecodeError

logger = logging.getLogger(__name__)

NPUB_PREFIX = "npub"
NSEC_PREFIX = "nsec"
KEY_LENGTH = 32


class KeyPair(NamedTuple):
    npub: str
    nsec: str


def _encode(prefix: str, data: bytes) -> str:
    if len(data) != KEY_LENGTH:
        raise KeyDecodeError(f"Expected a {KEY_LENGTH} byte key, got {len(data)} bytes")
    words = bech32.convertbits(data, 8, 5)
    return bech32.bech32_encode(prefix, words)


def decode(value: str) -> Tuple[str, bytes]:
    """Decode a Bech32 key into ``(prefix, raw_key_bytes)``."""
    if not isinstance(value, str) or not value:
        raise KeyDecodeError("Key must be a non-empty string")

    prefix, words = bech32.bech32_decode(value.strip())
    if prefix is None:
        raise KeyDecodeError("Key is not a valid Bech32 string")

    data = bech32.convertbits(words, 5, 8, False)
    if data is None or len(data) != KEY_LENGTH:
        raise KeyDecodeError("Key has an invalid length")

    return prefix, bytes(data)


def npub_encode(public_key: bytes) -> str:
    return _encode(NPUB_PREFIX, public_key)


def nsec_encode(secret_key: bytes) -> str:
    return _encode(NSEC_PREFIX, secret_key)


def npub_decode(npub: str) -> bytes:
    prefix, data = decode(npub)
    if prefix != NPUB_PREFIX:
        raise KeyDecodeError("Not a valid npub")
    return data


def nsec_decode(nsec: str) -> bytes:
    prefix, data = decode(nsec)
    if prefix != NSEC_PREFIX:
        raise KeyDecodeError("Not a valid nsec")
    return data


def derive_public_key(secret_key: bytes) -> bytes:
    """x-only public key for a secret scalar."""
    try:
        private_key = coincurve.PrivateKey(secret_key)
    except ValueError as e:
        raise KeyDecodeError("Secret key is out of range") from e
    # Compressed form is 0x02/0x03 followed by the x-coordinate
    return private_key.public_key.format(compressed=True)[1:]


def generate_key_pair() -> KeyPair:
    """Generate a new key pair from OS randomness."""
    private_key = coincurve.PrivateKey()
    public_key = private_key.public_key.format(compressed=True)[1:]
    return KeyPair(npub=npub_encode(public_key), nsec=nsec_encode(private_key.secret))


def verify_key_pair(npub: str, nsec: str) -> bool:
    """True if and only if ``nsec`` derives the public key in ``npub``. Never raises."""
    try:
        secret = nsec_decode(nsec)
        derived = derive_public_key(secret)
        return derived == npub_decode(npub)
    except (KeyDecodeError, ValueError, TypeError) as e:
        logger.info("Key pair verification failed", extra={"error": str(e)})
        return False


def is_valid_npub(value: str) -> bool:
    try:
        npub_decode(value)
    except KeyDecodeError:
        return False
    return True


def hex_to_npub(hex_public_key: str) -> str:
    try:
        raw = bytes.fromhex(hex_public_key)
    except (TypeError, ValueError) as e:
        raise KeyDecodeError("Public key is not valid hex") from e
    return npub_encode(raw)


def npub_to_hex(npub: str) -> str:
    return npub_decode(npub).hex()
