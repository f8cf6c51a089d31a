"""Tests for the SQLite record store."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import text

from boardctl.infrastructure.database.engine import init_database
from boardctl.infrastructure.store import (
    InvalidRecordError,
    RecordNotFoundError,
    RecordStore,
    StageMismatchError,
)


def _ids(store: RecordStore, stage: str) -> list[str]:
    return [r["id"] for r in store.fetch("tareas", stage_field="estado") if r["estado"] == stage]


class TestDatabase:
    def test_init_creates_parent_and_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "board.db"
        engine = init_database(db_path)
        try:
            assert db_path.exists()
            with engine.connect() as conn:
                mode = conn.execute(text("PRAGMA journal_mode")).scalar()
                query = text("SELECT name FROM sqlite_master WHERE type='table'")
                tables = list(conn.execute(query).scalars())
            assert mode == "wal"
            assert "records" in tables
        finally:
            engine.dispose()

    def test_init_is_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "board.db"
        init_database(db_path).dispose()
        init_database(db_path).dispose()


class TestReads:
    def test_fetch_orders_by_position_then_creation(self, seeded_store: RecordStore) -> None:
        rows = seeded_store.fetch("tareas", stage_field="estado")
        assert [r["id"] for r in rows] == ["T-1", "T-3", "T-4", "T-5", "T-2"]
        assert _ids(seeded_store, "Pendiente") == ["T-1", "T-2"]

    def test_fetch_returns_payload_and_stage(self, seeded_store: RecordStore) -> None:
        record = seeded_store.get("tareas", "T-3", stage_field="estado")
        assert record == {"id": "T-3", "titulo": "Revisar contrato", "estado": "En Progreso"}

    def test_fetch_unknown_board_is_empty(self, seeded_store: RecordStore) -> None:
        assert seeded_store.fetch("oportunidades") == []

    def test_get_missing(self, seeded_store: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError, match="T-99"):
            seeded_store.get("tareas", "T-99")

    def test_boards(self, seeded_store: RecordStore) -> None:
        seeded_store.add_many(
            "oportunidades", [{"id": "O-1", "estado": "abierta"}], stage_field="estado"
        )
        assert seeded_store.boards() == {"oportunidades": 1, "tareas": 5}


class TestAddMany:
    def test_missing_stage_rejected(self, store: RecordStore) -> None:
        with pytest.raises(InvalidRecordError):
            store.add_many("tareas", [{"id": "T-1"}], stage_field="estado")
        assert store.fetch("tareas") == []

    def test_missing_id_rejected(self, store: RecordStore) -> None:
        with pytest.raises(InvalidRecordError):
            store.add_many("tareas", [{"estado": "Pendiente"}], stage_field="estado")

    @pytest.mark.parametrize("stage", [None, 3, ["Pendiente"]])
    def test_non_string_stage_rejected(self, store: RecordStore, stage: object) -> None:
        with pytest.raises(InvalidRecordError, match="must be a string"):
            store.add_many("tareas", [{"id": "A", "estado": stage}], stage_field="estado")
        assert store.fetch("tareas") == []

    @pytest.mark.parametrize("record_id", [None, "", True, 1.5])
    def test_unusable_id_rejected(self, store: RecordStore, record_id: object) -> None:
        with pytest.raises(InvalidRecordError, match="non-empty string or integer"):
            store.add_many(
                "tareas", [{"id": record_id, "estado": "Pendiente"}], stage_field="estado"
            )

    def test_ids_differing_only_by_type_rejected(self, store: RecordStore) -> None:
        items = [{"id": "1", "estado": "Pendiente"}, {"id": 1, "estado": "Terminada"}]
        with pytest.raises(InvalidRecordError, match="collide"):
            store.add_many("tareas", items, stage_field="estado")
        assert store.fetch("tareas") == []

    def test_batch_rolled_back_on_invalid_record(self, store: RecordStore) -> None:
        items = [{"id": "A", "estado": "Pendiente"}, {"id": "B", "estado": None}]
        with pytest.raises(InvalidRecordError):
            store.add_many("tareas", items, stage_field="estado")
        assert store.fetch("tareas") == []

    def test_numeric_ids_stored_as_text(self, store: RecordStore) -> None:
        store.add_many("tareas", [{"id": 7, "estado": "Pendiente"}], stage_field="estado")
        assert store.fetch("tareas", stage_field="estado")[0]["id"] == "7"

    def test_upsert_keeps_position_within_stage(self, seeded_store: RecordStore) -> None:
        seeded_store.add_many(
            "tareas",
            [{"id": "T-1", "titulo": "Llamar de nuevo", "estado": "Pendiente"}],
            stage_field="estado",
        )
        assert _ids(seeded_store, "Pendiente") == ["T-1", "T-2"]
        record = seeded_store.get("tareas", "T-1", stage_field="estado")
        assert record["titulo"] == "Llamar de nuevo"

    def test_upsert_with_new_stage_appends(self, seeded_store: RecordStore) -> None:
        seeded_store.add_many(
            "tareas", [{"id": "T-1", "estado": "En Progreso"}], stage_field="estado"
        )
        assert _ids(seeded_store, "En Progreso") == ["T-3", "T-1"]

    def test_input_not_mutated(self, store: RecordStore) -> None:
        item = {"id": "T-1", "titulo": "x", "estado": "Pendiente"}
        store.add_many("tareas", [item], stage_field="estado")
        assert item == {"id": "T-1", "titulo": "x", "estado": "Pendiente"}


class TestUpdateStage:
    def test_appends_to_target_stage(self, seeded_store: RecordStore) -> None:
        write = seeded_store.update_stage("tareas", "T-1", "En Progreso")
        assert write == {"id": "T-1", "previous_stage": "Pendiente", "stage": "En Progreso"}
        assert _ids(seeded_store, "En Progreso") == ["T-3", "T-1"]
        assert _ids(seeded_store, "Pendiente") == ["T-2"]

    def test_same_stage_is_unchanged(self, seeded_store: RecordStore) -> None:
        seeded_store.update_stage("tareas", "T-1", "Pendiente")
        assert _ids(seeded_store, "Pendiente") == ["T-1", "T-2"]

    def test_unknown_record(self, seeded_store: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError):
            seeded_store.update_stage("tareas", "T-99", "Pendiente")

    def test_payload_untouched(self, seeded_store: RecordStore) -> None:
        seeded_store.update_stage("tareas", "T-4", "Cancelada")
        record = seeded_store.get("tareas", "T-4", stage_field="estado")
        assert record == {"id": "T-4", "titulo": "Cerrar trato", "estado": "Cancelada"}


class TestReorder:
    @pytest.fixture
    def three(self, store: RecordStore) -> RecordStore:
        store.add_many(
            "tareas",
            [{"id": f"P-{i}", "estado": "Pendiente"} for i in range(3)],
            stage_field="estado",
        )
        return store

    def test_move_down(self, three: RecordStore) -> None:
        write = three.reorder("tareas", "P-0", 2, "Pendiente")
        assert write == {"id": "P-0", "stage": "Pendiente", "previous_index": 0, "index": 2}
        assert _ids(three, "Pendiente") == ["P-1", "P-2", "P-0"]

    def test_move_up(self, three: RecordStore) -> None:
        three.reorder("tareas", "P-2", 0, "Pendiente")
        assert _ids(three, "Pendiente") == ["P-2", "P-0", "P-1"]

    def test_index_clamped(self, three: RecordStore) -> None:
        write = three.reorder("tareas", "P-0", 99, "Pendiente")
        assert write["index"] == 2
        assert _ids(three, "Pendiente") == ["P-1", "P-2", "P-0"]

    def test_survives_new_store_instance(self, three: RecordStore) -> None:
        three.reorder("tareas", "P-1", 0, "Pendiente")
        other = RecordStore(three.path)
        try:
            assert _ids(other, "Pendiente") == ["P-1", "P-0", "P-2"]
        finally:
            other.close()

    def test_stage_mismatch(self, three: RecordStore) -> None:
        with pytest.raises(StageMismatchError) as exc_info:
            three.reorder("tareas", "P-0", 1, "Terminada")
        assert exc_info.value.actual == "Pendiente"
        assert _ids(three, "Pendiente") == ["P-0", "P-1", "P-2"]
