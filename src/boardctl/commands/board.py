"""Command group: display boards and drag cards between stages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boardctl.commands._base import BoardGroup, board_option
from boardctl.services.board import BoardService

if TYPE_CHECKING:
    from boardctl.commands._context import AppContext

_BOARD_EXAMPLES = """\
  boardctl board show
  boardctl board show -b oportunidades
  boardctl board stages -b doc_comerciales
  boardctl board move T-1 "En Progreso"
  boardctl board move T-1 Pendiente --index 0
  boardctl board cancel T-1"""


@click.group(cls=BoardGroup, examples=_BOARD_EXAMPLES)
@click.pass_obj
def board(app: AppContext) -> None:
    """Show boards and move cards."""


@board.command(
    examples="""\
  boardctl board show
  boardctl board show -b oportunidades
  boardctl --json board show
  boardctl -q board show"""
)
@board_option
@click.pass_obj
def show(app: AppContext, board_name: str | None) -> None:
    """Render the board: one column per stage."""
    app.emit(BoardService(app.store, app.registry).show(app.board_name(board_name)))


@board.command(
    examples="""\
  boardctl board stages
  boardctl board stages -b oportunidades"""
)
@board_option
@click.pass_obj
def stages(app: AppContext, board_name: str | None) -> None:
    """List the board's stages in order, with card counts."""
    app.emit(BoardService(app.store, app.registry).stages(app.board_name(board_name)))


@board.command(
    examples="""\
  boardctl board move T-1 Terminada
  boardctl board move T-2 Pendiente --index 0
  boardctl board move OP-7 ganada -b oportunidades"""
)
@click.argument("card_id")
@click.argument("stage")
@click.option(
    "--index",
    type=click.IntRange(min=0),
    default=None,
    help="Drop position inside the stage (default: end).",
)
@board_option
@click.pass_obj
def move(
    app: AppContext,
    card_id: str,
    stage: str,
    index: int | None,
    board_name: str | None,
) -> None:
    """Drag CARD_ID and drop it on STAGE.

    Within the same stage this reorders the card. Across stages the card
    changes stage and is appended to the end of the target stage.
    """
    svc = BoardService(app.store, app.registry)
    app.emit(svc.move(app.board_name(board_name), card_id, stage, index))


@board.command(examples="  boardctl board cancel T-1")
@click.argument("card_id")
@board_option
@click.pass_obj
def cancel(app: AppContext, card_id: str, board_name: str | None) -> None:
    """Pick up CARD_ID and cancel the drag (no changes are written)."""
    app.emit(BoardService(app.store, app.registry).cancel(app.board_name(board_name), card_id))
