from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel
from ..identity.errors import KeyDecodeError
from ..identity.keys import npub_decode, npub_encode


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    npub: str = Field(..., min_length=1)

    @field_validator("npub")
    @classmethod
    def npub_must_decode(cls, value: str) -> str:
        # Stored in canonical form so padded or upper-case spellings collide
        try:
            return npub_encode(npub_decode(value))
        except KeyDecodeError:
            raise ValueError("npub must be a Bech32 encoded public key")


class UserLogin(CamelModel):
    npub: str = Field(..., min_length=1)

    @field_validator("npub")
    @classmethod
    def canonical_npub(cls, value: str) -> str:
        # Anything that doesn't decode is looked up as given and ends in a 404
        try:
            return npub_encode(npub_decode(value))
        except KeyDecodeError:
            return value


class UserResponse(CamelModel):
    """Public view of a user; the password hash never leaves the server"""
    id: int
    username: str
    npub: str


class User(CamelModel):
    id: int
    username: str
    password: str
    npub: str
    created_at: Optional[datetime] = None
