"""
Context Loader - Assemble provider, signer and address from settings.

Assembly is all-or-nothing: either every value parses, or a
``ConfigurationError`` is raised before any network I/O happens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from .config import Settings
from .errors import ConfigurationError
from .pneuma.rpc import JsonRpcClient, Provider
from .sigil.stark import Signer, StarkSigner
from .utils import FeltError, parse_felt


@dataclass(frozen=True)
class ExecutionContext:
    provider: Provider
    signer: Signer
    address: int


def _felt_setting(settings: Settings, name: str, label: str) -> int:
    raw = settings.require(name)
    try:
        return parse_felt(raw)
    except FeltError as exc:
        # Never echo the raw value; it may be the private key.
        raise ConfigurationError(f"{label} is not a valid field element") from exc


def load_signer(settings: Settings) -> StarkSigner:
    secret = _felt_setting(settings, "private_key", "STARKNET_PRIVATE_KEY")
    try:
        return StarkSigner(secret)
    except ValueError as exc:
        raise ConfigurationError(f"STARKNET_PRIVATE_KEY is not a usable key: {exc}") from exc


def load_context(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ExecutionContext:
    """
    Build an ExecutionContext from settings.

    Args:
        settings: Run settings (RPC URL, private key, account address)
        transport: Optional httpx transport for the RPC client

    Returns:
        ExecutionContext with a ready JSON-RPC client

    Raises:
        ConfigurationError: If any value is missing or malformed
    """
    rpc_url = settings.require("rpc_url")
    signer = load_signer(settings)
    address = _felt_setting(settings, "account_address", "STARKNET_ACCOUNT_ADDRESS")

    # Client last, so a bad key or address never opens a connection pool.
    try:
        provider = JsonRpcClient(rpc_url, transport=transport)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    return ExecutionContext(provider=provider, signer=signer, address=address)
