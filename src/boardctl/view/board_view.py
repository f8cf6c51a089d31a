"""BoardView — adapter between a materialized board and a drag capability.

The view re-registers every region from the board it is handed on each
:meth:`BoardView.render` call and keeps only gesture-scoped state: the
card being dragged and the cards whose mutation is still in flight.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar, cast

from boardctl.domain.board import Board, Card, Stage
from boardctl.domain.drops import (
    DropResult,
    ReorderCallback,
    UpdateCallback,
    reconcile,
)
from boardctl.view.capability import DragDropCapability, DragEndEvent, DragStartEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")

RenderCard = Callable[[Card[T], bool], V]


def _default_render(card: Card[object], is_dragging: bool) -> str:
    return f"{card.id} (dragging)" if is_dragging else card.id


class BoardView(Generic[T, V]):
    """Render a board through a capability and reconcile its drops.

    Args:
        capability: The drag-and-drop implementation.
        on_update: Stage transition callback (see :func:`reconcile`).
        on_reorder: Same-stage reorder callback, or ``None``.
        render_card: ``render_card(card, is_dragging)`` presentation hook.
        on_card_click: Called with the card id on click.
        is_drag_disabled: Extra caller-side drag lock per card id.
    """

    def __init__(
        self,
        capability: DragDropCapability,
        *,
        on_update: UpdateCallback[object],
        on_reorder: ReorderCallback[object] | None = None,
        render_card: RenderCard[T, V] | None = None,
        on_card_click: Callable[[str], None] | None = None,
        is_drag_disabled: Callable[[str], bool] | None = None,
    ) -> None:
        self._capability = capability
        self._on_update = on_update
        self._on_reorder = on_reorder
        default = cast("RenderCard[T, V]", _default_render)
        self._render_card: RenderCard[T, V] = render_card or default
        self._on_card_click = on_card_click
        self._is_drag_disabled = is_drag_disabled
        self._board: Board[T] | None = None
        self._active_id: str | None = None
        self._pending: set[str] = set()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board[T]:
        if self._board is None:
            raise RuntimeError("BoardView.render() has not been called")
        return self._board

    def render(self, board: Board[T]) -> None:
        """Register one droppable per stage and one draggable per card id."""
        self._board = board
        cap = self._capability
        cap.reset()
        cap.bind(self._handle_drag_start, self._handle_drag_end)
        for stage in board.stages:
            cap.register_droppable(stage.id)
            for index, card_id in enumerate(stage.card_ids):
                if card_id not in board.cards:
                    continue
                cap.register_draggable(
                    card_id, stage.id, index, disabled=self.is_drag_disabled(card_id)
                )

    def render_cards(self) -> list[tuple[Stage, list[V]]]:
        """Rendered cards per stage, in board order."""
        board = self.board
        columns: list[tuple[Stage, list[V]]] = []
        for stage in board.stages:
            rendered: list[V] = []
            for card_id in stage.card_ids:
                card = board.cards.get(card_id)
                if card is None:
                    continue
                rendered.append(self._render_card(card, card_id == self._active_id))
            columns.append((stage, rendered))
        return columns

    def render_overlay(self) -> V | None:
        """Detached copy of the card being dragged, if any."""
        if self._active_id is None or self._board is None:
            return None
        card = self._board.cards.get(self._active_id)
        if card is None:
            return None
        return self._render_card(card, True)

    # ------------------------------------------------------------------
    # Interaction state
    # ------------------------------------------------------------------

    @property
    def dragging(self) -> str | None:
        return self._active_id

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    def is_drag_disabled(self, card_id: str) -> bool:
        if card_id in self._pending:
            return True
        return bool(self._is_drag_disabled and self._is_drag_disabled(card_id))

    def click_card(self, card_id: str) -> None:
        """Forward a click unless the card is mid-drag."""
        if card_id == self._active_id or self._on_card_click is None:
            return
        self._on_card_click(card_id)

    # ------------------------------------------------------------------
    # Capability events
    # ------------------------------------------------------------------

    def _handle_drag_start(self, event: DragStartEvent) -> None:
        logger.debug("Drag start: %s at %s", event.draggable_id, event.source)
        self._active_id = event.draggable_id

    async def _handle_drag_end(self, event: DragEndEvent) -> object:
        self._active_id = None
        result = DropResult(
            draggable_id=event.draggable_id,
            source=event.source,
            destination=event.destination,
        )
        card_id = event.draggable_id
        self._pending.add(card_id)
        try:
            return await reconcile(
                result,
                self._on_update,
                self._on_reorder,
                stage_ids=self.board.stage_ids,
            )
        finally:
            self._pending.discard(card_id)
