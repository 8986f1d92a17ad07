from .errors import IdentityError, KeyDecodeError, SignerUnavailableError
from .keys import KeyPair, generate_key_pair, verify_key_pair

__all__ = [
    "IdentityError",
    "KeyDecodeError",
    "SignerUnavailableError",
    "KeyPair",
    "generate_key_pair",
    "verify_key_pair",
]
