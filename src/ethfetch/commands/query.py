"""
Read-only commands: chain id, balances, eth_call and receipts.
"""

from __future__ import annotations

import json
from dataclasses import asdict

import click

from ..client import EthClient
from . import run
from ..utils import to_data


@click.command("chain-id")
@click.pass_obj
def chain_id(client: EthClient) -> None:
    """Show the chain id."""
    click.echo(run(client.get_chain_id))


@click.command()
@click.argument("address")
@click.option("--block", default="latest", show_default=True, help="Block tag or number")
@click.pass_obj
def balance(client: EthClient, address: str, block: str) -> None:
    """Show the balance of ADDRESS in wei."""
    click.echo(run(lambda: client.methods.get_balance(address, block)))


@click.command()
@click.option("--to", required=True, help="Contract address")
@click.option("--data", default="0x", help="Hex calldata")
@click.option("--value", default=None, type=int, help="ETH value in wei")
@click.pass_obj
def call(client: EthClient, to: str, data: str, value: int | None) -> None:
    """Execute an off-chain contract call and print the raw result."""
    result = run(lambda: client.off_chain_contract_call(to, data, value=value))
    click.echo(to_data(result))


@click.command()
@click.argument("tx_hash")
@click.pass_obj
def receipt(client: EthClient, tx_hash: str) -> None:
    """Show the receipt of a mined transaction."""
    result = run(lambda: client.methods.get_transaction_receipt(tx_hash))
    if result is None:
        click.echo("Transaction is not mined yet.")
        return
    click.echo(json.dumps(asdict(result), indent=2))
