"""
starkinvoke CLI

Command-line interface for submitting single Starknet contract calls.

Commands:
  invoke    - Sign and broadcast one contract call, print its hash
  selector  - Show the entry-point selector of a function name
  whoami    - Show the configured account address and public key
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import Settings
from .context import load_signer
from .errors import ConfigurationError, StarkInvokeError
from .pneuma.call import get_selector_from_name
from .utils import FeltError, format_felt, parse_felt


# ============ Constants ============

VERSION = "0.1.0"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="starkinvoke")
@click.option("-v", "--verbose", is_flag=True, help="Log RPC traffic to stderr")
def cli(verbose: bool) -> None:
    """starkinvoke — fire-and-forget Starknet contract calls."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


# ============ Top-level Commands ============

from .theurgy.invoke import invoke

cli.add_command(invoke)


@cli.command()
@click.argument("name")
def selector(name: str) -> None:
    """Show the selector for a function NAME."""
    try:
        value = get_selector_from_name(name)
    except StarkInvokeError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)
    click.echo(format_felt(value))


@cli.command()
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Load variables from a .env file first",
)
def whoami(env_file: Optional[Path]) -> None:
    """Show the configured account identity."""
    try:
        settings = Settings.from_env(env_file=env_file)
        signer = load_signer(settings)
        address = parse_felt(settings.require("account_address"))
    except FeltError:
        click.secho("ERROR: STARKNET_ACCOUNT_ADDRESS is not a valid field element", fg="red", err=True)
        sys.exit(ConfigurationError.exit_code)
    except StarkInvokeError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)

    click.echo(f"Address:    {format_felt(address)}")
    click.echo(f"Public key: {format_felt(signer.get_public_key())}")


# ============ Entry Points ============


def main() -> None:
    """starkinvoke CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
