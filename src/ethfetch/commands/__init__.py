"""
CLI subcommands.

Each command receives the EthClient built by the top-level group and
maps ethfetch errors to exit codes through ``run``.
"""

from __future__ import annotations

import sys
from typing import Callable, TypeVar

import click

from ..errors import EthFetchError

T = TypeVar("T")


def run(action: Callable[[], T]) -> T:
    """Run a client action, mapping ethfetch errors to CLI exit codes."""
    try:
        return action()
    except EthFetchError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
