"""
ethfetch CLI

Command-line interface for talking to an Ethereum JSON-RPC node.

Signing is local when PRIVATE_KEY is configured (environment or
~/.ethfetch/.env), otherwise the node signs with its own accounts.

Commands:
  chain-id      - Show the node's chain id
  balance       - Show an account balance
  call          - Off-chain contract call (eth_call)
  receipt       - Show a mined transaction receipt
  send-eth      - Transfer ETH and wait for confirmation
  deploy        - Deploy contract bytecode
  invoke        - On-chain contract call
  sign-message  - Sign a message (personal_sign prefix)
  whoami        - Show the local signing address
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .client import EthClient
from .config import DEFAULT_RPC_URL, get_chain_id_override, get_rpc_url, load_env, load_private_key
from .commands import run
from .keys import get_address, private_key_signer


# ============ Constants ============

VERSION = "1.0.0"


# ============ Client construction ============


def build_client(
    rpc_url: str,
    chain_id: Optional[int],
    gas_price: Optional[int],
) -> EthClient:
    """Create a client, signing locally when a private key is configured."""
    try:
        private_key = load_private_key()
    except ValueError:
        private_key = None

    if private_key is None:
        return EthClient(
            rpc_url,
            gas_price_provider=(lambda: gas_price) if gas_price is not None else None,
            chain_id=chain_id,
        )

    address = get_address(private_key)
    return EthClient(
        rpc_url,
        gas_price_provider=(lambda: gas_price) if gas_price is not None else None,
        address_provider=lambda: address,
        signature_fn=private_key_signer(private_key),
        chain_id=chain_id,
    )


# ============ Option parsing ============


def _parse_chain_id(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[int]:
    """Accept decimal or 0x-prefixed chain ids."""
    if value is None:
        return None
    try:
        return int(value, 0)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a decimal or hex integer")


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="ethfetch")
@click.option(
    "--rpc-url",
    default=None,
    help=f"JSON-RPC endpoint (default: $ETH_RPC_URL or {DEFAULT_RPC_URL})",
)
@click.option(
    "--chain-id",
    default=None,
    callback=_parse_chain_id,
    help="Fixed chain id, decimal or hex (default: $ETH_CHAIN_ID or ask the node)",
)
@click.option("--gas-price", type=int, default=None, help="Gas price in wei (default: node)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    gas_price: Optional[int],
    verbose: bool,
) -> None:
    """ethfetch - Ethereum JSON-RPC client."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # The dotenv file seeds ETH_RPC_URL / ETH_CHAIN_ID, so it must be
    # loaded before falling back to the environment.
    load_env()
    if rpc_url is None:
        rpc_url = get_rpc_url()
    if chain_id is None:
        try:
            chain_id = get_chain_id_override()
        except ValueError:
            raise click.BadParameter("ETH_CHAIN_ID is not a decimal or hex integer", param_hint="--chain-id")
    ctx.obj = build_client(rpc_url, chain_id, gas_price)


# ============ Commands ============

from .commands.query import balance, call, chain_id, receipt
from .commands.transact import deploy, invoke, send_eth

cli.add_command(chain_id)
cli.add_command(balance)
cli.add_command(call)
cli.add_command(receipt)
cli.add_command(send_eth)
cli.add_command(deploy)
cli.add_command(invoke)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the local signing address."""
    try:
        address = get_address(load_private_key())
    except ValueError:
        click.echo("No private key configured.")
        click.echo("Set PRIVATE_KEY in the environment or ~/.ethfetch/.env.")
        sys.exit(1)
    click.echo(f"Address: {address}")


@cli.command("sign-message")
@click.argument("message")
@click.option("--address", default=None, help="Account for node-side signing")
@click.pass_obj
def sign_message(client: EthClient, message: str, address: Optional[str]) -> None:
    """Sign MESSAGE with the personal_sign prefix."""
    signature = run(lambda: client.sign_message(message, address))
    click.echo("0x" + signature.hex())
