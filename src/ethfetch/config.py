"""
Runtime configuration.

Values come from the process environment, optionally seeded from a
dotenv file (``~/.ethfetch/.env`` or ``$ETHFETCH_ENV``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ETHFETCH_DIR = Path.home() / ".ethfetch"
ETHFETCH_ENV = ETHFETCH_DIR / ".env"

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 1.0


def env_path() -> Path:
    override = os.environ.get("ETHFETCH_ENV")
    return Path(override) if override else ETHFETCH_ENV


def load_env(path: Optional[Path] = None) -> Optional[Path]:
    """
    Load a dotenv file into the environment if it exists.

    Values already present in the environment win.

    Returns:
        The path that was loaded, or None if there was nothing to load.
    """
    path = path or env_path()
    if not path.exists():
        return None
    load_dotenv(path, override=False)
    return path


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("ETH_RPC_URL", DEFAULT_RPC_URL)


def get_chain_id_override() -> Optional[int]:
    """Chain id pinned by configuration, or None to ask the node."""
    value = os.environ.get("ETH_CHAIN_ID")
    if not value:
        return None
    return int(value, 0)


def get_rpc_timeout() -> float:
    return float(os.environ.get("ETH_RPC_TIMEOUT", str(DEFAULT_RPC_TIMEOUT)))


def get_poll_interval() -> float:
    return float(os.environ.get("ETH_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL)))


def load_private_key(path: Optional[Path] = None) -> str:
    """
    Load the signing key from the environment (or the dotenv file).

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not configured
    """
    path = path or env_path()
    load_env(path)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set it in the environment or in {path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key
