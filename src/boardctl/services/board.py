"""BoardService — materialize boards and apply drag gestures to the store.

Every operation follows the same cycle: FETCH the canonical records,
MATERIALIZE a fresh board, RENDER it through a BoardView, optionally
DRAG a card (which reconciles into a store write), then REFETCH and
RESPOND. No board outlives the call that built it.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import anyio
from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError

from boardctl.domain.board import Board, Card, materialize
from boardctl.domain.drops import MutationIntent
from boardctl.domain.stages import BoardDefinition
from boardctl.infrastructure.store import StoreError
from boardctl.services.base import BaseService
from boardctl.services.result import ServiceResult
from boardctl.view.board_view import BoardView
from boardctl.view.capability import DragRejectedError, ScriptedDragDrop

logger = logging.getLogger(__name__)

Record = dict[str, Any]


def card_summary(
    definition: BoardDefinition,
) -> Callable[[Card[Record], bool], dict[str, Any]]:
    """Return a ``render_card`` hook producing ``{"id", "title"}`` dicts."""

    def render(card: Card[Record], is_dragging: bool) -> dict[str, Any]:
        title = card.data.get(definition.title_field) or card.id
        summary: dict[str, Any] = {"id": card.id, "title": str(title)}
        if is_dragging:
            summary["dragging"] = True
        return summary

    return render


class BoardService(BaseService):
    """Board display and drag-and-drop operations."""

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def show(self, name: str) -> ServiceResult:
        """Materialize *name* and return its stages with rendered cards."""
        op = "show_board"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition

        board = self._materialize(definition)
        view: BoardView[Record, dict[str, Any]] = BoardView(
            ScriptedDragDrop(),
            on_update=self._unused_update,
            render_card=card_summary(definition),
        )
        view.render(board)

        stages = [
            {
                "id": stage.id,
                "label": stage.title,
                "color": stage.config.text_color if stage.config else "default",
                "count": len(cards),
                "cards": cards,
            }
            for stage, cards in view.render_cards()
        ]
        warnings: list[str] = []
        if board.excluded:
            warnings.append(
                f"{len(board.excluded)} record(s) have a stage not on this board: "
                + ", ".join(board.excluded)
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": definition.name, "total": len(board), "stages": stages},
            warnings=warnings,
            meta={"excluded": list(board.excluded)},
        )

    def stages(self, name: str) -> ServiceResult:
        """List the configured stages of *name* with current card counts."""
        op = "list_stages"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition

        counts = self._materialize(definition).counts()
        items = [
            {
                "id": stage_id,
                "label": definition.get_config(stage_id).label,
                "color": definition.get_config(stage_id).text_color,
                "count": counts[stage_id],
            }
            for stage_id in definition.stage_order
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": definition.name, "stage_field": definition.stage_field, "items": items},
        )

    def card(self, name: str, card_id: str) -> ServiceResult:
        """Open a card the way a click on the board would."""
        op = "show_card"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition

        board = self._materialize(definition)
        opened: list[str] = []
        view: BoardView[Record, Any] = BoardView(
            ScriptedDragDrop(),
            on_update=self._unused_update,
            on_card_click=opened.append,
        )
        view.render(board)
        view.click_card(card_id)

        if not opened or opened[0] not in board.cards:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No card {card_id!r} on board {definition.name!r}"
            )
        location = board.locate(card_id)
        assert location is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board": definition.name,
                "id": card_id,
                "stage": location[0],
                "index": location[1],
                "record": board.cards[card_id].data,
            },
        )

    # ------------------------------------------------------------------
    # Drag operations
    # ------------------------------------------------------------------

    def move(
        self,
        name: str,
        card_id: str,
        to_stage: str,
        to_index: int | None = None,
    ) -> ServiceResult:
        """Drag *card_id* to *to_stage* at *to_index* (default: stage end).

        Same-stage drops reorder; cross-stage drops change the stage and
        place the card after the last card of the target stage, whatever
        *to_index* was.
        """
        op = "move_card"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition
        if not definition.has_stage(to_stage):
            return ServiceResult.failure(
                op,
                "UNKNOWN_STAGE",
                f"Unknown stage {to_stage!r} on board {definition.name!r}",
                stages=list(definition.stage_order),
            )
        if to_index is not None and to_index < 0:
            return ServiceResult.failure(op, "INVALID_INDEX", f"Index must be >= 0: {to_index}")

        return self._gesture(
            op,
            definition,
            card_id,
            lambda capability: capability.drag(card_id, to_stage, to_index),
            requested={"stage": to_stage, "index": to_index},
        )

    def cancel(self, name: str, card_id: str) -> ServiceResult:
        """Pick up *card_id* and cancel the drag. Never writes."""
        op = "cancel_drag"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition
        return self._gesture(
            op,
            definition,
            card_id,
            lambda capability: capability.cancel(card_id),
            requested=None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _materialize(self, definition: BoardDefinition) -> Board[Record]:
        records = self._store.fetch(definition.name, stage_field=definition.stage_field)
        return materialize(records, definition)

    @staticmethod
    async def _unused_update(card_id: str, stage_id: str) -> None:
        raise RuntimeError("Read-only board view received a drop")

    def _gesture(
        self,
        op: str,
        definition: BoardDefinition,
        card_id: str,
        perform: Callable[[ScriptedDragDrop], Awaitable[object]],
        *,
        requested: dict[str, Any] | None,
    ) -> ServiceResult:
        board_name = definition.name
        intent = MutationIntent.NOOP
        store = self._store

        async def on_update(cid: str, stage_id: str) -> dict[str, Any]:
            nonlocal intent
            intent = MutationIntent.TRANSITION
            return await to_thread.run_sync(store.update_stage, board_name, cid, stage_id)

        async def on_reorder(cid: str, index: int, stage_id: str) -> dict[str, Any]:
            nonlocal intent
            intent = MutationIntent.REORDER
            return await to_thread.run_sync(store.reorder, board_name, cid, index, stage_id)

        board = self._materialize(definition)
        before = board.locate(card_id)
        capability = ScriptedDragDrop()
        view: BoardView[Record, Any] = BoardView(
            capability, on_update=on_update, on_reorder=on_reorder
        )
        view.render(board)

        try:
            outcome = anyio.run(perform, capability)
        except DragRejectedError as exc:
            return ServiceResult.failure(op, "DRAG_REJECTED", str(exc), card_id=card_id)
        except (StoreError, SQLAlchemyError) as exc:
            logger.warning("Mutation failed for %s/%s: %s", board_name, card_id, exc)
            return ServiceResult.failure(
                op, "MUTATION_FAILED", str(exc), card_id=card_id, intent=str(intent)
            )

        after = self._materialize(definition).locate(card_id)
        logger.debug("%s %s/%s: %s -> %s", intent, board_name, card_id, before, after)

        data: dict[str, Any] = {
            "board": board_name,
            "id": card_id,
            "intent": str(intent),
            "from": _location(before),
            "to": _location(after),
        }
        if requested is not None:
            data["requested"] = requested
        if isinstance(outcome, dict):
            data["write"] = outcome

        warnings: list[str] = []
        if (
            intent is MutationIntent.TRANSITION
            and requested is not None
            and requested["index"] is not None
            and after is not None
            and after[1] != requested["index"]
        ):
            warnings.append(
                f"Cross-stage move appends: card placed at index {after[1]}, "
                f"not {requested['index']}"
            )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)


def _location(location: tuple[str, int] | None) -> dict[str, Any] | None:
    if location is None:
        return None
    return {"stage": location[0], "index": location[1]}
