"""NIP-04 encrypted direct message payloads."""
import base64
import binascii
import os

import coincurve
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import KeyDecodeError

IV_SEPARATOR = "?iv="


def _shared_secret(secret_hex: str, peer_public_hex: str) -> bytes:
    try:
        secret = bytes.fromhex(secret_hex)
        # Nostr public keys are x-only; assume the even-y point
        peer = coincurve.PublicKey(b"\x02" + bytes.fromhex(peer_public_hex))
        point = peer.multiply(secret)
    except ValueError as e:
        raise KeyDecodeError("Invalid key for encryption") from e
    # NIP-04 uses the raw x-coordinate, unhashed
    return point.format(compressed=True)[1:]


def encrypt(secret_hex: str, peer_public_hex: str, text: str) -> str:
    key = _shared_secret(secret_hex, peer_public_hex)
    iv = os.urandom(16)

    padder = padding.PKCS7(128).padder()
    padded = padder.update(text.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return (
        base64.b64encode(ciphertext).decode("ascii")
        + IV_SEPARATOR
        + base64.b64encode(iv).decode("ascii")
    )


def decrypt(secret_hex: str, peer_public_hex: str, payload: str) -> str:
    if IV_SEPARATOR not in payload:
        raise KeyDecodeError("Encrypted payload is missing its IV")

    body, iv_part = payload.split(IV_SEPARATOR, 1)
    try:
        ciphertext = base64.b64decode(body, validate=True)
        iv = base64.b64decode(iv_part, validate=True)
    except binascii.Error as e:
        raise KeyDecodeError("Encrypted payload is not valid base64") from e

    key = _shared_secret(secret_hex, peer_public_hex)
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(128).unpadder()
        plain = unpadder.update(padded) + unpadder.finalize()
        return plain.decode("utf-8")
    except ValueError as e:
        raise KeyDecodeError("Could not decrypt payload") from e
