"""
Transaction Submitter - Build, sign, and send Starknet INVOKE v3 transactions.

Uses the account's signer for signing and its JSON-RPC provider for
sending.  Fees follow the usual SDK default: estimate first, then allow
1.5x the estimated gas amounts and prices.  The submitter returns as
soon as the node accepts the broadcast; it does not wait for inclusion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from poseidon_py.poseidon_hash import poseidon_hash_many

from ..errors import MalformedResponseError, SigningError, StarkInvokeError
from ..utils import encode_shortstring
from .account import InvocableAccount
from .call import Call

logger = logging.getLogger(__name__)

TRANSACTION_VERSION = 3
QUERY_VERSION_BASE = 2**128
INVOKE_PREFIX = encode_shortstring("invoke")

L1_GAS_NAME = encode_shortstring("L1_GAS")
L2_GAS_NAME = encode_shortstring("L2_GAS")
L1_DATA_GAS_NAME = encode_shortstring("L1_DATA")

DA_MODE_L1 = 0

MAX_AMOUNT = 2**64 - 1
MAX_PRICE_PER_UNIT = 2**128 - 1

# Multipliers applied to the fee estimate, as (numerator, denominator).
GAS_ESTIMATE_MULTIPLIER = (3, 2)
GAS_PRICE_ESTIMATE_MULTIPLIER = (3, 2)


@dataclass(frozen=True)
class ResourceBounds:
    max_amount: int = 0
    max_price_per_unit: int = 0

    def to_rpc(self) -> dict[str, str]:
        return {
            "max_amount": hex(self.max_amount),
            "max_price_per_unit": hex(self.max_price_per_unit),
        }


@dataclass(frozen=True)
class ResourceBoundsMapping:
    l1_gas: ResourceBounds = ResourceBounds()
    l2_gas: ResourceBounds = ResourceBounds()
    l1_data_gas: ResourceBounds = ResourceBounds()

    def to_rpc(self) -> dict[str, dict[str, str]]:
        return {
            "l1_gas": self.l1_gas.to_rpc(),
            "l1_data_gas": self.l1_data_gas.to_rpc(),
            "l2_gas": self.l2_gas.to_rpc(),
        }


@dataclass(frozen=True)
class InvokeTransactionResult:
    """Broadcast acknowledgement from the node."""

    transaction_hash: int
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


def _bound_felt(name: int, bounds: ResourceBounds) -> int:
    return (name << 192) | (bounds.max_amount << 128) | bounds.max_price_per_unit


def compute_invoke_v3_hash(
    sender_address: int,
    calldata: Sequence[int],
    chain_id: int,
    nonce: int,
    resource_bounds: ResourceBoundsMapping,
    tip: int = 0,
    query: bool = False,
) -> int:
    """
    Compute the Poseidon hash of an INVOKE v3 transaction.

    Paymaster data and account deployment data are always empty and both
    data-availability modes are L1.

    Args:
        sender_address: Account contract address
        calldata: ``__execute__`` calldata
        chain_id: Target chain id
        nonce: Account nonce
        resource_bounds: Gas bounds
        tip: Priority tip
        query: Hash the query-only version (fee estimation)

    Returns:
        Transaction hash as an int
    """
    version = TRANSACTION_VERSION + (QUERY_VERSION_BASE if query else 0)
    fee_fields_hash = poseidon_hash_many(
        [
            tip,
            _bound_felt(L1_GAS_NAME, resource_bounds.l1_gas),
            _bound_felt(L2_GAS_NAME, resource_bounds.l2_gas),
            _bound_felt(L1_DATA_GAS_NAME, resource_bounds.l1_data_gas),
        ]
    )
    da_modes = (DA_MODE_L1 << 32) | DA_MODE_L1
    return poseidon_hash_many(
        [
            INVOKE_PREFIX,
            version,
            sender_address,
            fee_fields_hash,
            poseidon_hash_many([]),
            chain_id,
            nonce,
            da_modes,
            poseidon_hash_many([]),
            poseidon_hash_many(list(calldata)),
        ]
    )


def _scale(value: int, multiplier: tuple[int, int], cap: int) -> int:
    numerator, denominator = multiplier
    return min(-(-value * numerator // denominator), cap)


def resource_bounds_from_estimate(estimate: dict[str, Any]) -> ResourceBoundsMapping:
    """Derive resource bounds from a ``starknet_estimateFee`` entry."""

    def read(key: str) -> int:
        try:
            value = estimate[key]
            return value if isinstance(value, int) else int(value, 16)
        except (KeyError, TypeError, ValueError):
            raise MalformedResponseError(
                f"Fee estimate is missing or has invalid '{key}': {estimate!r}"
            ) from None

    def bounds(prefix: str) -> ResourceBounds:
        return ResourceBounds(
            max_amount=_scale(read(f"{prefix}_consumed"), GAS_ESTIMATE_MULTIPLIER, MAX_AMOUNT),
            max_price_per_unit=_scale(
                read(f"{prefix}_price"), GAS_PRICE_ESTIMATE_MULTIPLIER, MAX_PRICE_PER_UNIT
            ),
        )

    return ResourceBoundsMapping(
        l1_gas=bounds("l1_gas"),
        l2_gas=bounds("l2_gas"),
        l1_data_gas=bounds("l1_data_gas"),
    )


def _sign(account: InvocableAccount, tx_hash: int) -> list[int]:
    try:
        return list(account.signer.sign(tx_hash))
    except StarkInvokeError:
        raise
    except Exception as exc:
        raise SigningError(f"Failed to sign transaction: {exc}") from exc


def build_invoke_transaction(
    account: InvocableAccount,
    calldata: Sequence[int],
    nonce: int,
    resource_bounds: ResourceBoundsMapping,
    query: bool = False,
) -> tuple[int, dict[str, Any]]:
    """
    Hash, sign and serialise an INVOKE v3 transaction.

    Returns:
        Tuple of (transaction_hash, broadcasted_transaction)
    """
    tx_hash = compute_invoke_v3_hash(
        sender_address=account.address,
        calldata=calldata,
        chain_id=account.chain_id,
        nonce=nonce,
        resource_bounds=resource_bounds,
        query=query,
    )
    signature = _sign(account, tx_hash)
    version = TRANSACTION_VERSION + (QUERY_VERSION_BASE if query else 0)

    tx: dict[str, Any] = {
        "type": "INVOKE",
        "version": hex(version),
        "sender_address": hex(account.address),
        "calldata": [hex(x) for x in calldata],
        "signature": [hex(x) for x in signature],
        "nonce": hex(nonce),
        "resource_bounds": resource_bounds.to_rpc(),
        "tip": "0x0",
        "paymaster_data": [],
        "account_deployment_data": [],
        "nonce_data_availability_mode": "L1",
        "fee_data_availability_mode": "L1",
    }
    return tx_hash, tx


async def estimate_resource_bounds(
    account: InvocableAccount,
    calldata: Sequence[int],
    nonce: int,
) -> ResourceBoundsMapping:
    """Estimate gas with a signed query transaction and scale the result."""
    _, query_tx = build_invoke_transaction(
        account, calldata, nonce, ResourceBoundsMapping(), query=True
    )
    estimate = await account.provider.estimate_fee(query_tx)
    logger.debug("fee estimate: %s", estimate)
    return resource_bounds_from_estimate(estimate)


async def submit(account: InvocableAccount, calls: Sequence[Call]) -> InvokeTransactionResult:
    """
    Sign ``calls`` as one atomic transaction and broadcast it.

    Args:
        account: Account built by ``build_account``
        calls: Ordered calls; an empty list is a valid no-op transaction

    Returns:
        InvokeTransactionResult carrying the node-reported hash

    Raises:
        SubmissionError: Network failure, signing failure, node rejection
                         or malformed reply (see ``errors`` subclasses)
    """
    calldata = account.encode_calls(calls)
    logger.info("Submitting %d call(s) from %s", len(calls), hex(account.address))

    nonce = await account.provider.get_nonce(account.address)
    resource_bounds = await estimate_resource_bounds(account, calldata, nonce)

    local_hash, tx = build_invoke_transaction(account, calldata, nonce, resource_bounds)
    reply = await account.provider.add_invoke_transaction(tx)

    try:
        tx_hash = int(reply["transaction_hash"], 16)
    except (KeyError, TypeError, ValueError):
        raise MalformedResponseError(f"Invalid broadcast reply: {reply!r}") from None
    if tx_hash == 0:
        raise MalformedResponseError("Node acknowledged the broadcast with a zero hash")

    if tx_hash != local_hash:
        logger.warning(
            "Node hash %s differs from locally computed %s", hex(tx_hash), hex(local_hash)
        )

    raw = {k: v for k, v in reply.items() if k != "transaction_hash"}
    return InvokeTransactionResult(transaction_hash=tx_hash, raw=raw)
