"""
Settings for a single invoke run.

Values come from the process environment, optionally seeded from a
``.env`` file.  Nothing here parses or validates field elements; that
is the context loader's job, so a bad value fails in one place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .utils import FeltError, encode_shortstring, parse_felt

ENV_RPC_URL = "STARKNET_RPC_URL"
ENV_PRIVATE_KEY = "STARKNET_PRIVATE_KEY"
ENV_ACCOUNT_ADDRESS = "STARKNET_ACCOUNT_ADDRESS"
ENV_CONTRACT_ADDRESS = "STARKNET_CONTRACT_ADDRESS"
ENV_CHAIN = "STARKNET_CHAIN"

DEFAULT_FUNCTION = "mint_lords"
DEFAULT_CHAIN = "sepolia"

SN_MAIN = encode_shortstring("SN_MAIN")
SN_SEPOLIA = encode_shortstring("SN_SEPOLIA")

CHAINS: dict[str, int] = {
    "mainnet": SN_MAIN,
    "sepolia": SN_SEPOLIA,
}


def resolve_chain_id(name: str) -> int:
    """Map a chain name (``sepolia``, ``mainnet``) or hex id to a felt."""
    key = name.strip().lower()
    if key in CHAINS:
        return CHAINS[key]
    try:
        return parse_felt(name)
    except FeltError:
        raise ConfigurationError(
            f"Unknown chain '{name}'. Available: {', '.join(sorted(CHAINS))} or a hex chain id"
        ) from None


@dataclass(frozen=True)
class Settings:
    """Raw, unvalidated run configuration."""

    rpc_url: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    account_address: Optional[str] = None
    contract_address: Optional[str] = None
    chain: str = DEFAULT_CHAIN

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``)
            env_file: Optional ``.env`` file loaded into ``os.environ``
                      first; existing variables win.

        Returns:
            Settings with every known variable filled in when present
        """
        if env_file is not None:
            if not env_file.exists():
                raise ConfigurationError(f"Env file not found: {env_file}")
            load_dotenv(env_file, override=False)

        env = os.environ if environ is None else environ
        return cls(
            rpc_url=env.get(ENV_RPC_URL) or None,
            private_key=env.get(ENV_PRIVATE_KEY) or None,
            account_address=env.get(ENV_ACCOUNT_ADDRESS) or None,
            contract_address=env.get(ENV_CONTRACT_ADDRESS) or None,
            chain=env.get(ENV_CHAIN) or DEFAULT_CHAIN,
        )

    def require(self, name: str) -> str:
        """Return a required setting or raise ``ConfigurationError``."""
        value = getattr(self, name)
        if not value:
            env_name = {
                "rpc_url": ENV_RPC_URL,
                "private_key": ENV_PRIVATE_KEY,
                "account_address": ENV_ACCOUNT_ADDRESS,
                "contract_address": ENV_CONTRACT_ADDRESS,
            }.get(name, name)
            raise ConfigurationError(f"cannot find {env_name} env")
        return value
