"""Exceptions raised by the domain layer."""

from __future__ import annotations


class BoardError(Exception):
    """Base class for board configuration and reconciliation errors."""


class StageConfigError(BoardError):
    """A board definition is inconsistent (raised at startup)."""


class UnknownStageError(BoardError, KeyError):
    """A stage id is not part of the board's configured stage order."""

    def __init__(self, stage_id: str, stage_ids: tuple[str, ...] = ()) -> None:
        self.stage_id = stage_id
        self.stage_ids = stage_ids
        msg = f"Unknown stage: {stage_id!r}"
        if stage_ids:
            msg += f" (expected one of {list(stage_ids)})"
        super().__init__(msg)

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownBoardError(BoardError, KeyError):
    """No board definition is registered under the requested name."""

    def __init__(self, name: str, known: tuple[str, ...] = ()) -> None:
        self.name = name
        msg = f"Unknown board: {name!r}"
        if known:
            msg += f" (known: {', '.join(known)})"
        super().__init__(msg)

    def __str__(self) -> str:
        return str(self.args[0])
