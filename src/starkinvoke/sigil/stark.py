"""
STARK-curve key handling for Starknet accounts.

A signer wraps the raw secret scalar of a single-owner account and
produces ``[r, s]`` signatures over transaction hashes.  The scalar is
never exposed through ``repr`` and never logged.

Dependencies: starknet-py (curve arithmetic only, no account/provider layer)
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from starknet_py.hash.utils import (
    message_signature,
    private_to_stark_key,
)

from ..errors import SigningError

# Order of the STARK curve generator; valid secrets are in [1, EC_ORDER).
EC_ORDER = 0x800000000000010FFFFFFFFFFFFFFFFB781126DCAE7B2321E66A241ADC64D2F


@runtime_checkable
class Signer(Protocol):
    """Signing capability: turns a message hash into a signature."""

    def get_public_key(self) -> int: ...

    def sign(self, message_hash: int) -> list[int]: ...


class StarkSigner:
    """Local signer backed by a raw secret scalar."""

    __slots__ = ("_secret", "_public_key")

    def __init__(self, secret_scalar: int) -> None:
        if not 0 < secret_scalar < EC_ORDER:
            raise ValueError("Secret scalar is outside the STARK curve order")
        self._secret = secret_scalar
        self._public_key: Optional[int] = None

    def __repr__(self) -> str:
        return "StarkSigner(<redacted>)"

    def get_public_key(self) -> int:
        if self._public_key is None:
            self._public_key = private_to_stark_key(self._secret)
        return self._public_key

    def sign(self, message_hash: int) -> list[int]:
        try:
            r, s = message_signature(message_hash, self._secret)
        except Exception as exc:
            raise SigningError(f"Failed to sign transaction hash: {exc}") from exc
        return [r, s]
