"""Drop reconciliation — one drag gesture to at most one mutation.

Decision table, evaluated in order:

1. no destination                       -> no-op (cancelled / dropped outside)
2. same stage, same index               -> no-op (dropped back in place)
3. same stage, different index          -> ``on_reorder(card, index, stage)``
4. different stage                      -> ``on_update(card, stage)``

In the cross-stage branch the destination index is not forwarded: the
card's position in its new stage is whatever the next materialization
derives from the canonical record order.

Callback failures propagate unchanged. There is no retry and no
compensation; the next refresh shows the card where the backend left it.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from boardctl.domain.errors import UnknownStageError

logger = logging.getLogger(__name__)

R = TypeVar("R")

UpdateCallback = Callable[[str, str], Awaitable[R]]
ReorderCallback = Callable[[str, int, str], Awaitable[R]]


@dataclass(frozen=True)
class DropLocation:
    """A position on the board: stage id and index inside that stage."""

    stage_id: str
    index: int


@dataclass(frozen=True)
class DropResult:
    """A finished drag gesture as reported by the drag-and-drop capability."""

    draggable_id: str
    source: DropLocation
    destination: DropLocation | None = None


class MutationIntent(StrEnum):
    """What a drop asks the backend to do."""

    NOOP = "noop"
    REORDER = "reorder"
    TRANSITION = "transition"


def classify_drop(result: DropResult) -> MutationIntent:
    """Classify *result* without side effects."""
    destination = result.destination
    if destination is None:
        return MutationIntent.NOOP
    if destination.stage_id == result.source.stage_id:
        if destination.index == result.source.index:
            return MutationIntent.NOOP
        return MutationIntent.REORDER
    return MutationIntent.TRANSITION


def validate_drop(result: DropResult, stage_ids: Collection[str]) -> None:
    """Raise :class:`UnknownStageError` if *result* names an unconfigured stage."""
    known = tuple(stage_ids)
    if result.source.stage_id not in known:
        raise UnknownStageError(result.source.stage_id, known)
    if result.destination is not None and result.destination.stage_id not in known:
        raise UnknownStageError(result.destination.stage_id, known)


async def reconcile(
    result: DropResult,
    on_update: UpdateCallback[R],
    on_reorder: ReorderCallback[R] | None = None,
    *,
    stage_ids: Collection[str] | None = None,
) -> R | None:
    """Invoke at most one mutation callback for *result*.

    Args:
        result: The drop gesture.
        on_update: Called as ``on_update(card_id, new_stage_id)`` for a
            stage transition.
        on_reorder: Called as ``on_reorder(card_id, new_index, stage_id)``
            for a same-stage move. ``None`` means the board does not
            support reordering and such drops are ignored.
        stage_ids: When given, both ends of the drop must be one of these
            stage ids. Checked before any callback runs.

    Returns:
        The awaited callback's result, or ``None`` for a no-op.
    """
    if stage_ids is not None:
        validate_drop(result, stage_ids)

    intent = classify_drop(result)
    card_id = result.draggable_id

    if intent is MutationIntent.NOOP:
        logger.debug("Drop of %s is a no-op", card_id)
        return None

    destination = result.destination
    assert destination is not None

    if intent is MutationIntent.REORDER:
        if on_reorder is None:
            logger.debug("Reorder of %s ignored: board has no reorder handler", card_id)
            return None
        logger.debug(
            "Reorder %s in %s: %d -> %d",
            card_id,
            destination.stage_id,
            result.source.index,
            destination.index,
        )
        return await on_reorder(card_id, destination.index, destination.stage_id)

    logger.debug("Transition %s: %s -> %s", card_id, result.source.stage_id, destination.stage_id)
    return await on_update(card_id, destination.stage_id)
