"""
Account Builder - Bind a provider, signer and address into an account.

The account knows how to lay out a list of calls as ``__execute__``
calldata.  Two layouts exist on-chain:

- NEW:    Cairo 1 accounts, each call serialised inline
          ``[n, to, selector, len, *data, ...]``
- LEGACY: Cairo 0 accounts, call headers with offsets followed by one
          flat calldata array
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

from ..sigil.stark import Signer
from .call import Call
from .rpc import Provider


class ExecutionEncoding(enum.Enum):
    LEGACY = "legacy"
    NEW = "new"


@dataclass(frozen=True)
class InvocableAccount:
    provider: Provider
    signer: Signer
    address: int
    chain_id: int
    encoding: ExecutionEncoding = ExecutionEncoding.NEW

    def encode_calls(self, calls: Sequence[Call]) -> list[int]:
        """Serialise calls into ``__execute__`` calldata."""
        if self.encoding is ExecutionEncoding.LEGACY:
            return _encode_legacy(calls)
        return _encode_new(calls)


def _encode_new(calls: Sequence[Call]) -> list[int]:
    execute_calldata = [len(calls)]
    for call in calls:
        execute_calldata.extend((call.to, call.selector, len(call.calldata)))
        execute_calldata.extend(call.calldata)
    return execute_calldata


def _encode_legacy(calls: Sequence[Call]) -> list[int]:
    headers: list[int] = []
    flat: list[int] = []
    for call in calls:
        headers.extend((call.to, call.selector, len(flat), len(call.calldata)))
        flat.extend(call.calldata)
    return [len(calls), *headers, len(flat), *flat]


def build_account(
    provider: Provider,
    signer: Signer,
    address: int,
    chain_id: int,
) -> InvocableAccount:
    """Create an account using the current (Cairo 1) execution encoding."""
    return InvocableAccount(
        provider=provider,
        signer=signer,
        address=address,
        chain_id=chain_id,
        encoding=ExecutionEncoding.NEW,
    )
