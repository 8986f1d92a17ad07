"""
External signing agents (NIP-07 style).

A browser extension exposes ``getPublicKey()`` returning a hex public key.
Anything with an async ``get_public_key()`` satisfies the same contract here.
"""
import logging
from typing import Any, Optional, Protocol, runtime_checkable

from .errors import SignerUnavailableError
from .keys import derive_public_key, hex_to_npub, nsec_decode

logger = logging.getLogger(__name__)


@runtime_checkable
class ExternalSigner(Protocol):
    async def get_public_key(self) -> str:
        ...


class LocalSigner:
    """Signer backed by a key held in process."""

    def __init__(self, nsec: str):
        self._secret = nsec_decode(nsec)

    async def get_public_key(self) -> str:
        return derive_public_key(self._secret).hex()


def has_external_signer(candidate: Optional[Any]) -> bool:
    return candidate is not None and isinstance(candidate, ExternalSigner)


async def get_external_signer_public_key(candidate: Optional[Any]) -> str:
    """Ask the signer for its key and return it as an npub."""
    if not has_external_signer(candidate):
        raise SignerUnavailableError("No Nostr extension detected.")

    try:
        public_key = await candidate.get_public_key()
    except Exception:
        logger.exception("Error getting public key from signer")
        raise
    return hex_to_npub(public_key)
