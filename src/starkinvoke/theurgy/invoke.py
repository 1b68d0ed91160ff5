"""
Theurgy Invoke - Submit one contract call and print its hash.

Reads the RPC endpoint, account key and address from the environment
(or a ``.env`` file), signs a single INVOKE transaction and reports the
hash the node acknowledged.  Does not wait for inclusion.
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from ..config import DEFAULT_FUNCTION, Settings, resolve_chain_id
from ..context import load_context
from ..errors import StarkInvokeError
from ..pneuma.account import build_account
from ..pneuma.call import encode_call
from ..pneuma.tx import InvokeTransactionResult, submit
from ..utils import format_felt


async def run_invoke(
    settings: Settings,
    function_name: str = DEFAULT_FUNCTION,
    arguments: Sequence[str] = (),
) -> InvokeTransactionResult:
    """
    Full workflow: context -> account -> call -> submit.

    Every value is validated before the first request is sent.
    """
    chain_id = resolve_chain_id(settings.chain)
    context = load_context(settings)
    try:
        account = build_account(
            context.provider,
            context.signer,
            context.address,
            chain_id,
        )
        call = encode_call(
            settings.require("contract_address"),
            function_name,
            arguments,
        )
        return await submit(account, [call])
    finally:
        await context.provider.aclose()


@click.command()
@click.option("--contract", default=None, help="Target contract address [env: STARKNET_CONTRACT_ADDRESS]")
@click.option("--function", "func_name", default=DEFAULT_FUNCTION, show_default=True, help="Function name to call")
@click.option("--calldata", "calldata", multiple=True, help="Call argument, decimal or 0x-prefixed hex (repeatable, in order)")
@click.option("--chain", default=None, help="sepolia, mainnet or hex chain id [env: STARKNET_CHAIN]")
@click.option("--rpc-url", default=None, help="Starknet JSON-RPC URL [env: STARKNET_RPC_URL]")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Load variables from a .env file first",
)
def invoke(
    contract: Optional[str],
    func_name: str,
    calldata: tuple[str, ...],
    chain: Optional[str],
    rpc_url: Optional[str],
    env_file: Optional[Path],
) -> None:
    """
    Submit a single contract call.

    Signs and broadcasts one INVOKE transaction from the configured
    account, then prints the transaction hash.
    """
    try:
        settings = Settings.from_env(env_file=env_file)
        overrides = {
            "contract_address": contract,
            "chain": chain,
            "rpc_url": rpc_url,
        }
        settings = dataclasses.replace(
            settings, **{k: v for k, v in overrides.items() if v}
        )
        result = asyncio.run(run_invoke(settings, func_name, calldata))
    except StarkInvokeError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)

    click.echo(f"Transaction hash: {format_felt(result.transaction_hash)}")
