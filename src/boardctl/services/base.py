"""BaseService — shared foundation for boardctl services.

Every service receives the record store and the board registry at
construction time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from boardctl.domain.errors import UnknownBoardError
from boardctl.services.result import ServiceResult

if TYPE_CHECKING:
    from boardctl.domain.stages import BoardDefinition, BoardRegistry
    from boardctl.infrastructure.store import RecordStore


class BaseService:
    """Base for service-layer classes.

    Usage::

        class BoardService(BaseService):
            def show(self, name: str) -> ServiceResult:
                definition = self._board_or_error(name, op="show_board")
                ...
    """

    def __init__(self, store: RecordStore, registry: BoardRegistry) -> None:
        self._store = store
        self._registry = registry

    def _board_or_error(self, name: str, *, op: str) -> BoardDefinition | ServiceResult:
        """Look up a board definition, or build the UNKNOWN_BOARD result."""
        try:
            return self._registry.get(name)
        except UnknownBoardError as exc:
            return ServiceResult.failure(
                op, "UNKNOWN_BOARD", str(exc), known=list(self._registry.names())
            )
