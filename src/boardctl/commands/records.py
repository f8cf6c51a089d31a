"""Command group: load and inspect the records behind boards."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from boardctl.commands._base import BoardGroup, board_option
from boardctl.services.records import RecordService

if TYPE_CHECKING:
    from boardctl.commands._context import AppContext

_RECORDS_EXAMPLES = """\
  boardctl records import tareas.json
  boardctl records import oportunidades.json -b oportunidades
  boardctl records list
  boardctl records boards"""


@click.group(cls=BoardGroup, examples=_RECORDS_EXAMPLES)
@click.pass_obj
def records(app: AppContext) -> None:
    """Import and list board records."""


@records.command(
    name="import",
    examples="""\
  boardctl records import tareas.json
  boardctl records import docs.json -b doc_comerciales""",
)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@board_option
@click.pass_obj
def import_cmd(app: AppContext, path: Path, board_name: str | None) -> None:
    """Load a JSON array of records (each with id and stage field)."""
    svc = RecordService(app.store, app.registry)
    app.emit(svc.import_records(app.board_name(board_name), path))


@records.command(
    name="list",
    examples="""\
  boardctl records list
  boardctl --json records list -b oportunidades""",
)
@board_option
@click.pass_obj
def list_cmd(app: AppContext, board_name: str | None) -> None:
    """List a board's records in stored order."""
    app.emit(RecordService(app.store, app.registry).list_records(app.board_name(board_name)))


@records.command(examples="  boardctl records boards")
@click.pass_obj
def boards(app: AppContext) -> None:
    """Record counts for every board."""
    app.emit(RecordService(app.store, app.registry).summary())
