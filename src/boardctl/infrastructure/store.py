"""RecordStore — the canonical record list and its write endpoints.

The store plays the part of the hosted table service: boards read the
ordered record list from it and mutation callbacks write stage and
position changes back to it. Ordering key is ``(position, created, id)``
so both writes survive the next fetch.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update

from boardctl.infrastructure.database.engine import init_database
from boardctl.infrastructure.database.schema import records

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for record store failures."""


class RecordNotFoundError(StoreError):
    def __init__(self, board: str, record_id: str) -> None:
        self.board = board
        self.record_id = record_id
        super().__init__(f"No record {record_id!r} on board {board!r}")


class StageMismatchError(StoreError):
    def __init__(self, record_id: str, actual: str, expected: str) -> None:
        self.record_id = record_id
        self.actual = actual
        self.expected = expected
        super().__init__(f"Record {record_id!r} is in stage {actual!r}, not {expected!r}")


class InvalidRecordError(StoreError):
    """An imported record lacks a required field."""


def _now() -> str:
    return datetime.now(UTC).isoformat()


class RecordStore:
    """SQLite-backed record store, one row per (board, record id)."""

    def __init__(self, db_path: Path) -> None:
        self._path = db_path
        self._engine: Engine = init_database(db_path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Yield a connection inside ``engine.begin()`` (commit or roll back)."""
        with self._engine.begin() as conn:
            yield conn

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch(self, board: str, *, stage_field: str = "stage") -> list[dict[str, Any]]:
        """Return the canonical record list for *board*.

        Each record is its payload plus ``id`` and the stage value under
        *stage_field*.
        """
        stmt = (
            select(records)
            .where(records.c.board == board)
            .order_by(records.c.position, records.c.created, records.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [_to_record(row, stage_field) for row in rows]

    def get(self, board: str, record_id: str, *, stage_field: str = "stage") -> dict[str, Any]:
        with self._engine.connect() as conn:
            row = _select_one(conn, board, record_id)
        return _to_record(row, stage_field)

    def boards(self) -> dict[str, int]:
        """Record count per board name."""
        stmt = (
            select(records.c.board, func.count())
            .group_by(records.c.board)
            .order_by(records.c.board)
        )
        with self._engine.connect() as conn:
            return {board: count for board, count in conn.execute(stmt).all()}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_many(
        self,
        board: str,
        items: Iterable[Mapping[str, Any]],
        *,
        stage_field: str = "stage",
    ) -> int:
        """Insert or replace records; each is appended to its stage.

        Ids may be strings or integers and are stored as text; stage
        values must be strings.

        Raises:
            InvalidRecordError: A record has no usable ``id`` or stage, or
                two ids in *items* only differ by type (``1`` and ``"1"``).
        """
        count = 0
        seen: dict[str, object] = {}
        with self.transaction() as conn:
            for item in items:
                record_id, stage = _validate(item, stage_field)
                raw_id = item["id"]
                if record_id in seen and type(seen[record_id]) is not type(raw_id):
                    raise InvalidRecordError(
                        f"Ids {seen[record_id]!r} and {raw_id!r} collide as {record_id!r}"
                    )
                seen[record_id] = raw_id
                payload = {k: v for k, v in item.items() if k not in ("id", stage_field)}
                now = _now()
                existing = conn.execute(
                    select(records.c.stage, records.c.position).where(
                        records.c.board == board, records.c.id == record_id
                    )
                ).first()
                if existing is None:
                    conn.execute(
                        insert(records).values(
                            board=board,
                            id=record_id,
                            stage=stage,
                            position=_next_position(conn, board, stage),
                            payload=json.dumps(payload, ensure_ascii=False),
                            created=now,
                            modified=now,
                        )
                    )
                else:
                    position = existing.position
                    if existing.stage != stage:
                        position = _next_position(conn, board, stage)
                    conn.execute(
                        update(records)
                        .where(records.c.board == board, records.c.id == record_id)
                        .values(
                            stage=stage,
                            position=position,
                            payload=json.dumps(payload, ensure_ascii=False),
                            modified=now,
                        )
                    )
                count += 1
        logger.debug("Stored %d records on board %s", count, board)
        return count

    def update_stage(self, board: str, record_id: str, stage: str) -> dict[str, Any]:
        """Move a record to *stage*, placing it after the stage's last record."""
        with self.transaction() as conn:
            row = _select_one(conn, board, record_id)
            if row.stage != stage:
                conn.execute(
                    update(records)
                    .where(records.c.board == board, records.c.id == record_id)
                    .values(
                        stage=stage,
                        position=_next_position(conn, board, stage),
                        modified=_now(),
                    )
                )
            previous = row.stage
        logger.debug("Stage of %s/%s: %s -> %s", board, record_id, previous, stage)
        return {"id": record_id, "previous_stage": previous, "stage": stage}

    def reorder(self, board: str, record_id: str, new_index: int, stage: str) -> dict[str, Any]:
        """Move a record to *new_index* within *stage* and renumber the stage.

        *new_index* is clamped to the stage's bounds.
        """
        with self.transaction() as conn:
            row = _select_one(conn, board, record_id)
            if row.stage != stage:
                raise StageMismatchError(record_id, row.stage, stage)
            ordered = [
                r.id
                for r in conn.execute(
                    select(records.c.id)
                    .where(records.c.board == board, records.c.stage == stage)
                    .order_by(records.c.position, records.c.created, records.c.id)
                ).all()
            ]
            previous = ordered.index(record_id)
            ordered.pop(previous)
            index = max(0, min(new_index, len(ordered)))
            ordered.insert(index, record_id)
            now = _now()
            for position, rid in enumerate(ordered):
                values: dict[str, Any] = {"position": position}
                if rid == record_id:
                    values["modified"] = now
                conn.execute(
                    update(records)
                    .where(records.c.board == board, records.c.id == rid)
                    .values(**values)
                )
        logger.debug("Position of %s/%s in %s: %d -> %d", board, record_id, stage, previous, index)
        return {"id": record_id, "stage": stage, "previous_index": previous, "index": index}


def _validate(item: Mapping[str, Any], stage_field: str) -> tuple[str, str]:
    if "id" not in item or stage_field not in item:
        raise InvalidRecordError(f"Record needs 'id' and {stage_field!r}: {dict(item)}")
    raw_id = item["id"]
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)) or raw_id == "":
        raise InvalidRecordError(f"Record id must be a non-empty string or integer: {raw_id!r}")
    stage = item[stage_field]
    if not isinstance(stage, str):
        raise InvalidRecordError(
            f"Record {raw_id!r}: {stage_field!r} must be a string, got {stage!r}"
        )
    return str(raw_id), stage


def _select_one(conn: Connection, board: str, record_id: str) -> Row[Any]:
    row = conn.execute(
        select(records).where(records.c.board == board, records.c.id == record_id)
    ).first()
    if row is None:
        raise RecordNotFoundError(board, record_id)
    return row


def _next_position(conn: Connection, board: str, stage: str) -> int:
    current = conn.execute(
        select(func.max(records.c.position)).where(
            records.c.board == board, records.c.stage == stage
        )
    ).scalar()
    return 0 if current is None else current + 1


def _to_record(row: Row[Any], stage_field: str) -> dict[str, Any]:
    record: dict[str, Any] = {"id": row.id}
    record.update(json.loads(row.payload))
    record[stage_field] = row.stage
    return record
