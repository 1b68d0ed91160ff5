"""
CLI integration tests using Click's test runner.

The full invoke workflow runs against an in-memory Starknet node
(httpx.MockTransport), so no network access or chain interaction is needed.
"""

from __future__ import annotations

import functools
import os
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from starkinvoke.cli import cli
from starkinvoke.context import load_context
from starkinvoke.pneuma.call import get_selector_from_name
from starkinvoke.utils import format_felt

EXPECTED_LINE = (
    "Transaction hash: 0x0000000000000000000000000000000000000000000000000000000000000004"
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def starknet_env() -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if not k.startswith("STARKNET_")}
    env.update(
        {
            "STARKNET_RPC_URL": "https://stub.local/rpc",
            "STARKNET_PRIVATE_KEY": "0x1",
            "STARKNET_ACCOUNT_ADDRESS": "0x2",
            "STARKNET_CONTRACT_ADDRESS": "0x3",
        }
    )
    return env


def _with_node(node):
    return patch(
        "starkinvoke.theurgy.invoke.load_context",
        functools.partial(load_context, transport=node.transport()),
    )


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInvoke:
    """End-to-end invoke runs against the stub node."""

    def test_reference_run(self, runner: CliRunner, starknet_env, stub_node) -> None:
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(cli, ["invoke"])

        assert result.exit_code == 0, result.output
        assert EXPECTED_LINE in result.output
        assert stub_node.methods == [
            "starknet_getNonce",
            "starknet_estimateFee",
            "starknet_addInvokeTransaction",
        ]

        broadcast = stub_node.requests[-1]["params"][0]
        assert broadcast["sender_address"] == "0x2"
        assert broadcast["calldata"] == [
            "0x1",
            "0x3",
            hex(get_selector_from_name("mint_lords")),
            "0x0",
        ]

    def test_function_and_calldata_options(
        self, runner: CliRunner, starknet_env, stub_node
    ) -> None:
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(
                cli,
                ["invoke", "--function", "transfer", "--calldata", "0x10", "--calldata", "5"],
            )

        assert result.exit_code == 0, result.output
        calldata = stub_node.requests[-1]["params"][0]["calldata"]
        assert calldata[-3:] == ["0x2", "0x10", "0x5"]

    def test_decimal_calldata(self, runner: CliRunner, starknet_env, stub_node) -> None:
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(cli, ["invoke", "--function", "transfer", "--calldata", "10"])

        assert result.exit_code == 0, result.output
        assert stub_node.requests[-1]["params"][0]["calldata"][-1] == "0xa"

    def test_invalid_rpc_port(self, runner: CliRunner, starknet_env, stub_node) -> None:
        starknet_env["STARKNET_RPC_URL"] = "https://stub.local:abc/rpc"
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(cli, ["invoke"])

        assert result.exit_code == 2
        assert "ERROR:" in result.output
        assert "Transaction hash" not in result.output
        assert stub_node.requests == []

    def test_node_rejection(
        self, runner: CliRunner, starknet_env, make_stub_node
    ) -> None:
        node = make_stub_node(error={"code": 55, "message": "Account validation failed"})
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(node):
            result = runner.invoke(cli, ["invoke"])

        assert result.exit_code != 0
        assert "Transaction hash" not in result.output
        assert "Account validation failed" in result.output

    def test_missing_env(self, runner: CliRunner, starknet_env, stub_node) -> None:
        del starknet_env["STARKNET_RPC_URL"]
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(cli, ["invoke"])

        assert result.exit_code == 2
        assert "STARKNET_RPC_URL" in result.output
        assert stub_node.requests == []

    def test_malformed_contract_address(
        self, runner: CliRunner, starknet_env, stub_node
    ) -> None:
        starknet_env["STARKNET_CONTRACT_ADDRESS"] = "0xnothex"
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(cli, ["invoke"])

        assert result.exit_code == 3
        assert "Transaction hash" not in result.output
        assert stub_node.requests == []

    def test_unknown_chain(self, runner: CliRunner, starknet_env, stub_node) -> None:
        with patch.dict(os.environ, starknet_env, clear=True), _with_node(stub_node):
            result = runner.invoke(cli, ["invoke", "--chain", "goerli"])

        assert result.exit_code == 2
        assert stub_node.requests == []


class TestSelector:
    def test_selector(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["selector", "mint_lords"])
        assert result.exit_code == 0
        assert result.output.strip() == format_felt(get_selector_from_name("mint_lords"))

    def test_invalid_name(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["selector", "not valid"])
        assert result.exit_code == 3


class TestWhoami:
    def test_whoami(self, runner: CliRunner, starknet_env) -> None:
        with patch.dict(os.environ, starknet_env, clear=True):
            result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert format_felt(0x2) in result.output
        assert "Public key:" in result.output

    def test_whoami_without_key(self, runner: CliRunner, starknet_env) -> None:
        del starknet_env["STARKNET_PRIVATE_KEY"]
        with patch.dict(os.environ, starknet_env, clear=True):
            result = runner.invoke(cli, ["whoami"])
        assert result.exit_code != 0
        assert "STARKNET_PRIVATE_KEY" in result.output
