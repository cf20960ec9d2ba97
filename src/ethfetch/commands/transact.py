"""
State-changing commands: transfers, deployments and contract calls.

Each command blocks until the transaction is mined. There is no
timeout; interrupt with Ctrl-C to stop waiting (the transaction may
still be mined later).
"""

from __future__ import annotations

from typing import Optional

import click

from ..client import EthClient
from ..tx.models import TransactionReceipt
from . import run


def _print_receipt(receipt: TransactionReceipt) -> None:
    click.echo(f"  TX: {receipt.transaction_hash}")
    click.echo(f"  Block: {receipt.block_number}")
    if receipt.gas_used is not None:
        click.echo(f"  Gas used: {receipt.gas_used}")


@click.command("send-eth")
@click.option("--to", required=True, help="Recipient address")
@click.option("--value", required=True, type=int, help="Amount in wei")
@click.pass_obj
def send_eth(client: EthClient, to: str, value: int) -> None:
    """Transfer ETH and wait for confirmation."""
    click.echo(f"Sending {value} wei to {to} ...")
    receipt = run(lambda: client.send_eth(to, value))
    click.secho("SUCCESS: Transaction confirmed!", fg="green")
    _print_receipt(receipt)


@click.command()
@click.option("--bytecode", required=True, help="Hex deployment bytecode (with constructor args)")
@click.option("--value", default=None, type=int, help="ETH value in wei")
@click.pass_obj
def deploy(client: EthClient, bytecode: str, value: Optional[int]) -> None:
    """Deploy a contract and print its address."""
    click.echo("Deploying contract ...")
    address = run(lambda: client.deploy_contract(bytecode, value))
    click.secho("SUCCESS: Contract deployed!", fg="green")
    click.echo(f"  Address: {address}")


@click.command()
@click.option("--to", required=True, help="Target contract address")
@click.option("--data", required=True, help="Hex calldata")
@click.option("--value", default=None, type=int, help="ETH value in wei")
@click.option("--gas-limit", default=None, type=int, help="Gas limit (default: estimate)")
@click.option("--nonce", default=None, type=int, help="Nonce (default: pending count)")
@click.pass_obj
def invoke(
    client: EthClient,
    to: str,
    data: str,
    value: Optional[int],
    gas_limit: Optional[int],
    nonce: Optional[int],
) -> None:
    """
    Execute an on-chain contract call.

    Sends a transaction to the specified contract and waits until it is
    mined. Exits non-zero if it reverts.
    """
    click.echo(f"  Target: {to}")
    click.echo(f"  Data: {data}")
    if value:
        click.echo(f"  Value: {value} wei")
    click.echo("")

    receipt = run(
        lambda: client.on_chain_contract_call(
            to, data, value=value, gas_limit=gas_limit, nonce=nonce
        )
    )
    click.secho("SUCCESS: Transaction confirmed!", fg="green")
    _print_receipt(receipt)
