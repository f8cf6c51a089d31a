"""Command: open a single card."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boardctl.commands._base import BoardCommand, board_option

if TYPE_CHECKING:
    from boardctl.commands._context import AppContext


@click.command(
    cls=BoardCommand,
    examples="""\
  boardctl card T-1
  boardctl card OP-7 -b oportunidades
  boardctl --json card T-1""",
)
@click.argument("card_id")
@board_option
@click.pass_obj
def card(app: AppContext, card_id: str, board_name: str | None) -> None:
    """Show CARD_ID's stage, position, and record fields."""
    from boardctl.services.board import BoardService

    app.emit(BoardService(app.store, app.registry).card(app.board_name(board_name), card_id))
