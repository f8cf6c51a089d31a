"""Subcommand modules for boardctl.

register_commands() imports command modules lazily so ``boardctl --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on the root group."""
    from boardctl.commands.board import board
    from boardctl.commands.card import card
    from boardctl.commands.records import records

    cli.add_command(board)
    cli.add_command(records)
    cli.add_command(card)
