"""Tests for drop classification and reconciliation."""

from __future__ import annotations

from typing import Any

import anyio
import pytest

from boardctl.domain.drops import (
    DropLocation,
    DropResult,
    MutationIntent,
    classify_drop,
    reconcile,
    validate_drop,
)
from boardctl.domain.errors import UnknownStageError


class Recorder:
    """Async callbacks that record their calls."""

    def __init__(self, *, fail: Exception | None = None) -> None:
        self.updates: list[tuple[str, str]] = []
        self.reorders: list[tuple[str, int, str]] = []
        self.fail = fail

    async def on_update(self, card_id: str, stage_id: str) -> Any:
        self.updates.append((card_id, stage_id))
        if self.fail is not None:
            raise self.fail
        return "updated"

    async def on_reorder(self, card_id: str, index: int, stage_id: str) -> Any:
        self.reorders.append((card_id, index, stage_id))
        if self.fail is not None:
            raise self.fail
        return "reordered"


def _drop(src: tuple[str, int], dst: tuple[str, int] | None, card: str = "t1") -> DropResult:
    destination = DropLocation(*dst) if dst is not None else None
    return DropResult(card, DropLocation(*src), destination)


def _run(result: DropResult, rec: Recorder, *, reorder: bool = True, **kwargs: Any) -> Any:
    on_reorder = rec.on_reorder if reorder else None
    return anyio.run(lambda: reconcile(result, rec.on_update, on_reorder, **kwargs))


class TestClassifyDrop:
    @pytest.mark.parametrize(
        ("src", "dst", "expected"),
        [
            (("A", 0), None, MutationIntent.NOOP),
            (("A", 2), ("A", 2), MutationIntent.NOOP),
            (("A", 0), ("A", 3), MutationIntent.REORDER),
            (("A", 0), ("B", 0), MutationIntent.TRANSITION),
            (("A", 1), ("B", 1), MutationIntent.TRANSITION),
        ],
    )
    def test_decision_table(
        self, src: tuple[str, int], dst: tuple[str, int] | None, expected: MutationIntent
    ) -> None:
        assert classify_drop(_drop(src, dst)) is expected


class TestReconcile:
    def test_same_position_is_noop(self) -> None:
        rec = Recorder()
        assert _run(_drop(("Pendiente", 2), ("Pendiente", 2)), rec) is None
        assert rec.updates == []
        assert rec.reorders == []

    def test_cancelled_drag_is_noop(self) -> None:
        rec = Recorder()
        assert _run(_drop(("A", 0), None), rec) is None
        assert rec.updates == []
        assert rec.reorders == []

    def test_cross_stage_calls_update_once(self) -> None:
        rec = Recorder()
        outcome = _run(_drop(("A", 0), ("B", 1)), rec)
        assert outcome == "updated"
        assert rec.updates == [("t1", "B")]
        assert rec.reorders == []

    def test_cross_stage_discards_destination_index(self) -> None:
        rec = Recorder()
        _run(_drop(("A", 0), ("B", 7)), rec)
        assert rec.updates == [("t1", "B")]

    def test_same_stage_calls_reorder_once(self) -> None:
        rec = Recorder()
        outcome = _run(_drop(("A", 0), ("A", 3)), rec)
        assert outcome == "reordered"
        assert rec.reorders == [("t1", 3, "A")]
        assert rec.updates == []

    def test_reorder_without_handler_is_noop(self) -> None:
        rec = Recorder()
        assert _run(_drop(("A", 0), ("A", 3)), rec, reorder=False) is None
        assert rec.updates == []
        assert rec.reorders == []

    def test_update_failure_propagates(self) -> None:
        rec = Recorder(fail=ValueError("backend down"))
        with pytest.raises(ValueError, match="backend down"):
            _run(_drop(("A", 0), ("B", 0)), rec)
        assert rec.updates == [("t1", "B")]

    def test_reorder_failure_propagates(self) -> None:
        rec = Recorder(fail=RuntimeError("conflict"))
        with pytest.raises(RuntimeError, match="conflict"):
            _run(_drop(("A", 0), ("A", 1)), rec)
        assert rec.reorders == [("t1", 1, "A")]

    def test_unknown_destination_rejected_before_callbacks(self) -> None:
        rec = Recorder()
        with pytest.raises(UnknownStageError) as exc_info:
            _run(_drop(("A", 0), ("Z", 0)), rec, stage_ids=("A", "B"))
        assert exc_info.value.stage_id == "Z"
        assert rec.updates == []

    def test_unknown_source_rejected(self) -> None:
        rec = Recorder()
        with pytest.raises(UnknownStageError):
            _run(_drop(("Z", 0), None), rec, stage_ids=("A", "B"))

    def test_unvalidated_without_stage_ids(self) -> None:
        rec = Recorder()
        _run(_drop(("A", 0), ("Z", 0)), rec)
        assert rec.updates == [("t1", "Z")]


class TestValidateDrop:
    def test_known_stages_pass(self) -> None:
        validate_drop(_drop(("A", 0), ("B", 1)), ["A", "B"])
        validate_drop(_drop(("A", 0), None), ["A"])

    def test_error_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            validate_drop(_drop(("A", 0), ("C", 0)), ["A", "B"])
