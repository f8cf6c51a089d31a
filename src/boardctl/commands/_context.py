"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The board registry is validated at construction;
the record store opens lazily so ``--help`` never touches the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from boardctl.domain.errors import StageConfigError
from boardctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from boardctl.config.settings import BoardSettings
    from boardctl.domain.stages import BoardRegistry
    from boardctl.infrastructure.store import RecordStore
    from boardctl.services.result import ServiceResult


class AppContext:
    """Settings, registry, and the lazily opened record store."""

    def __init__(self, settings: BoardSettings) -> None:
        self.settings = settings
        self._store: RecordStore | None = None

        from boardctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        try:
            self.registry: BoardRegistry = settings.registry()
        except (StageConfigError, ValidationError) as exc:
            raise click.ClickException(f"Invalid board configuration: {exc}") from exc

    @property
    def store(self) -> RecordStore:
        """The record store (opened on first access)."""
        if self._store is None:
            from boardctl.infrastructure.store import RecordStore

            self._store = RecordStore(self.settings.db_path)
        return self._store

    def board_name(self, name: str | None) -> str:
        return name or self.settings.board.default

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr outside JSON mode.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            display=self.settings.display,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
