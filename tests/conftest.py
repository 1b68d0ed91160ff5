"""Shared fixtures: fake signer/provider and an in-memory Starknet node."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import pytest

from starkinvoke.config import SN_SEPOLIA
from starkinvoke.pneuma.account import build_account


FEE_ESTIMATE: dict[str, str] = {
    "l1_gas_consumed": "0x0",
    "l1_gas_price": "0x5",
    "l2_gas_consumed": "0x100",
    "l2_gas_price": "0x10",
    "l1_data_gas_consumed": "0x80",
    "l1_data_gas_price": "0x3",
    "overall_fee": "0x1180",
    "unit": "FRI",
}


class FakeSigner:
    """Deterministic signer: signature is derived from the hash."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.signed: list[int] = []

    def get_public_key(self) -> int:
        return 0xABC

    def sign(self, message_hash: int) -> list[int]:
        if self.fail:
            raise RuntimeError("hardware wallet unplugged")
        self.signed.append(message_hash)
        return [message_hash % 97, 1]


class FakeProvider:
    """In-memory provider recording every request it receives."""

    def __init__(
        self,
        nonce: int = 7,
        tx_hash: str = "0x4",
        reject: Optional[Exception] = None,
    ) -> None:
        self.nonce = nonce
        self.tx_hash = tx_hash
        self.reject = reject
        self.estimated: list[dict[str, Any]] = []
        self.broadcast: list[dict[str, Any]] = []

    async def get_nonce(self, address: int) -> int:
        return self.nonce

    async def estimate_fee(self, transaction: dict[str, Any]) -> dict[str, Any]:
        self.estimated.append(transaction)
        return dict(FEE_ESTIMATE)

    async def add_invoke_transaction(self, transaction: dict[str, Any]) -> dict[str, Any]:
        if self.reject is not None:
            raise self.reject
        self.broadcast.append(transaction)
        return {"transaction_hash": self.tx_hash}


class StubNode:
    """
    httpx handler that answers the starknet_* methods used by submission.

    Set ``error`` to a JSON-RPC error object to reject the broadcast.
    """

    def __init__(self, tx_hash: str = "0x4", error: Optional[dict] = None) -> None:
        self.tx_hash = tx_hash
        self.error = error
        self.requests: list[dict[str, Any]] = []

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        method = body["method"]

        if method == "starknet_getNonce":
            result: Any = "0x0"
        elif method == "starknet_estimateFee":
            result = [dict(FEE_ESTIMATE)]
        elif method == "starknet_addInvokeTransaction":
            if self.error is not None:
                return httpx.Response(
                    200, json={"jsonrpc": "2.0", "id": body["id"], "error": self.error}
                )
            result = {"transaction_hash": self.tx_hash}
        else:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32601, "message": "Method not found"},
                },
            )

        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture()
def fake_signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def account(fake_provider: FakeProvider, fake_signer: FakeSigner):
    return build_account(fake_provider, fake_signer, 0x2, SN_SEPOLIA)


@pytest.fixture()
def stub_node() -> StubNode:
    return StubNode()


@pytest.fixture()
def make_provider():
    return FakeProvider


@pytest.fixture()
def make_signer():
    return FakeSigner


@pytest.fixture()
def make_stub_node():
    return StubNode


@pytest.fixture()
def fee_estimate() -> dict[str, str]:
    return dict(FEE_ESTIMATE)
