"""
Call Encoder - Turn a function name and arguments into a Starknet call.

The selector is ``starknet_keccak(name)``: Keccak-256 of the ASCII name
truncated to its low 250 bits, the same convention the sequencer uses
to dispatch entry points.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from ..errors import EncodingError
from ..utils import FeltError, FeltLike, parse_argument, starknet_keccak, to_felt

DEFAULT_ENTRY_POINT_NAME = "__default__"
DEFAULT_L1_ENTRY_POINT_NAME = "__l1_default__"
DEFAULT_ENTRY_POINT_SELECTOR = 0

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Call:
    """One contract entry-point invocation."""

    to: int
    selector: int
    calldata: tuple[int, ...] = ()


def get_selector_from_name(function_name: str) -> int:
    """
    Compute the entry-point selector for a function name.

    Args:
        function_name: Cairo function name (e.g., "mint_lords")

    Returns:
        Selector as an int below 2**250

    Raises:
        EncodingError: If the name is not an ASCII identifier
    """
    if not isinstance(function_name, str) or not _IDENTIFIER.match(function_name):
        raise EncodingError(f"Invalid function name: {function_name!r}")

    if function_name in (DEFAULT_ENTRY_POINT_NAME, DEFAULT_L1_ENTRY_POINT_NAME):
        return DEFAULT_ENTRY_POINT_SELECTOR

    return starknet_keccak(function_name.encode("ascii"))


def encode_call(
    target_address: FeltLike,
    function_name: str,
    arguments: Iterable[FeltLike] = (),
) -> Call:
    """
    Build a Call from a target address, function name and arguments.

    Args:
        target_address: Contract address as int or hex string
        function_name: Function to invoke
        arguments: Positional calldata: ints, decimal strings or 0x-prefixed hex

    Returns:
        Call with resolved selector and felt calldata

    Raises:
        EncodingError: If the address, name or any argument is invalid
    """
    try:
        to = to_felt(target_address)
    except FeltError as exc:
        raise EncodingError(f"Invalid contract address: {exc}") from exc

    selector = get_selector_from_name(function_name)

    calldata = []
    for position, argument in enumerate(arguments):
        try:
            calldata.append(parse_argument(argument))
        except FeltError as exc:
            raise EncodingError(f"Invalid argument #{position}: {exc}") from exc

    return Call(to=to, selector=selector, calldata=tuple(calldata))
