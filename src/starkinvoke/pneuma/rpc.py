"""
JSON-RPC Client for Starknet nodes.

Lightweight alternative to a full SDK provider: uses httpx for HTTP and
speaks only the handful of ``starknet_*`` methods needed to submit an
INVOKE transaction.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Protocol

import httpx

from ..errors import MalformedResponseError, NetworkError, NodeRejectedError

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_ID = "latest"


class Provider(Protocol):
    """Network connection capability used by the transaction submitter."""

    async def get_nonce(self, address: int) -> int: ...

    async def estimate_fee(self, transaction: dict[str, Any]) -> dict[str, Any]: ...

    async def add_invoke_transaction(self, transaction: dict[str, Any]) -> dict[str, Any]: ...


def validate_rpc_url(url: str) -> str:
    """Return ``url`` if it is an absolute http(s) URL, else raise ValueError."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid RPC URL: {url!r} ({exc})") from None
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"Invalid RPC URL: {url!r}")
    return url


def _parse_hex(value: Any, field: str) -> int:
    if not isinstance(value, str):
        raise MalformedResponseError(f"Expected hex string for {field}, got {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise MalformedResponseError(f"Invalid hex for {field}: {value!r}") from None


class JsonRpcClient:
    """
    Async Starknet JSON-RPC client.

    Owns its ``httpx.AsyncClient``; use as an async context manager or
    call ``aclose()`` when done.
    """

    def __init__(
        self,
        url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = validate_rpc_url(url)
        self._client = httpx.AsyncClient(transport=transport)
        self._ids = itertools.count(1)

    def __repr__(self) -> str:
        return f"JsonRpcClient({self.url!r})"

    async def __aenter__(self) -> "JsonRpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, params: Any) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "starknet_getNonce")
            params: RPC parameters (positional list or named dict)

        Returns:
            Result field from the RPC response

        Raises:
            NetworkError: If the node cannot be reached or answers non-2xx
            NodeRejectedError: If the response carries an error object
            MalformedResponseError: If the response is not JSON-RPC
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("rpc %s -> %s", method, self.url)

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(f"{method} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"{method} returned non-JSON body") from exc

        if not isinstance(data, dict):
            raise MalformedResponseError(f"{method} returned {type(data).__name__}, not an object")

        if "error" in data:
            error = data["error"]
            if not isinstance(error, dict):
                error = {"message": str(error)}
            logger.debug("rpc %s rejected: %s", method, error)
            raise NodeRejectedError(
                code=error.get("code", 0),
                message=error.get("message", "unknown error"),
                data=error.get("data"),
            )

        if "result" not in data:
            raise MalformedResponseError(f"{method} response has no result")

        return data["result"]

    async def get_nonce(self, address: int, block_id: str = DEFAULT_BLOCK_ID) -> int:
        result = await self.call("starknet_getNonce", [block_id, hex(address)])
        return _parse_hex(result, "nonce")

    async def estimate_fee(
        self,
        transaction: dict[str, Any],
        block_id: str = DEFAULT_BLOCK_ID,
    ) -> dict[str, Any]:
        """Estimate the fee of one broadcasted transaction."""
        result = await self.call("starknet_estimateFee", [[transaction], [], block_id])
        if not isinstance(result, list) or len(result) != 1:
            raise MalformedResponseError(f"starknet_estimateFee returned {result!r}")
        return result[0]

    async def add_invoke_transaction(self, transaction: dict[str, Any]) -> dict[str, Any]:
        """Broadcast a signed INVOKE transaction."""
        result = await self.call("starknet_addInvokeTransaction", [transaction])
        if not isinstance(result, dict) or "transaction_hash" not in result:
            raise MalformedResponseError(
                f"starknet_addInvokeTransaction returned {result!r}"
            )
        return result
