from __future__ import annotations

import re
from typing import Union

from eth_hash.auto import keccak

FIELD_PRIME = 2**251 + 17 * 2**192 + 1
MASK_250 = 2**250 - 1

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")

FeltLike = Union[int, str]


class FeltError(ValueError):
    pass


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def starknet_keccak(data: bytes) -> int:
    return int.from_bytes(keccak256(data), "big") & MASK_250


def parse_felt(value: str) -> int:
    """Parse a hex string (``0x`` prefix optional) into a field element."""
    if not isinstance(value, str):
        raise FeltError(f"Expected a hex string, got {type(value).__name__}")
    text = value.strip()
    digits = text[2:] if text[:2].lower() == "0x" else text
    if not digits:
        raise FeltError(f"Empty hex value: {value!r}")
    if not _HEX_DIGITS.fullmatch(digits):
        raise FeltError(f"Not a hex number: {value!r}")
    number = int(digits, 16)
    if number >= FIELD_PRIME:
        raise FeltError(f"Value exceeds the field prime: {value!r}")
    return number


def to_felt(value: FeltLike) -> int:
    """Coerce an int or hex string into a field element."""
    if isinstance(value, bool):
        raise FeltError("Booleans are not field elements")
    if isinstance(value, int):
        if not 0 <= value < FIELD_PRIME:
            raise FeltError(f"Integer out of field range: {value}")
        return value
    return parse_felt(value)


def format_felt(value: int) -> str:
    """Canonical form: ``0x`` + 64 lowercase, zero-padded hex digits."""
    return f"0x{value:064x}"


def encode_shortstring(text: str) -> int:
    """Encode an ASCII string of at most 31 characters as a felt."""
    if len(text) > 31:
        raise FeltError(f"Short string longer than 31 characters: {text!r}")
    try:
        raw = text.encode("ascii")
    except UnicodeEncodeError:
        raise FeltError(f"Short string must be ASCII: {text!r}") from None
    return int.from_bytes(raw, "big")


def parse_argument(value: FeltLike) -> int:
    """
    Coerce a call argument into a field element.

    Strings are decimal unless ``0x``-prefixed; unlike addresses and
    keys, bare hex digits are rejected so ``10`` always means ten.
    """
    if not isinstance(value, str):
        return to_felt(value)
    text = value.strip()
    if text[:2].lower() == "0x":
        return parse_felt(text)
    if not text.isascii() or not text.isdigit():
        raise FeltError(f"Expected a decimal or 0x-prefixed hex number: {value!r}")
    return to_felt(int(text))
