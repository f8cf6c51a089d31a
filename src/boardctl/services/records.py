"""RecordService — load and list the canonical records behind a board."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from boardctl.infrastructure.store import InvalidRecordError
from boardctl.services.base import BaseService
from boardctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class RecordService(BaseService):
    """Import and inspect board records."""

    def import_records(self, name: str, path: Path) -> ServiceResult:
        """Load a JSON array of record objects into board *name*.

        Each object needs ``id`` and the board's stage field. Records
        already present are replaced. Records whose stage is not on the
        board are stored anyway and reported as warnings; they will not
        appear on the board.
        """
        op = "import_records"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            return ServiceResult.failure(op, "READ_FAILED", f"Cannot read {path}: {exc}")
        except json.JSONDecodeError as exc:
            return ServiceResult.failure(op, "INVALID_JSON", f"Invalid JSON in {path}: {exc}")

        if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
            return ServiceResult.failure(
                op, "INVALID_JSON", f"{path} must contain a JSON array of objects"
            )

        try:
            count = self._store.add_many(name, raw, stage_field=definition.stage_field)
        except InvalidRecordError as exc:
            return ServiceResult.failure(op, "INVALID_RECORD", str(exc))

        stages = set(definition.stage_order)
        off_board = [
            str(item["id"]) for item in raw if str(item[definition.stage_field]) not in stages
        ]
        warnings: list[str] = []
        if off_board:
            warnings.append(
                f"{len(off_board)} record(s) have a stage not on board "
                f"{definition.name!r}: {', '.join(off_board)}"
            )
        logger.debug("Imported %d records into %s from %s", count, name, path)
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": definition.name, "count": count, "path": str(path)},
            warnings=warnings,
        )

    def list_records(self, name: str) -> ServiceResult:
        """Canonical record list of *name*, in store order."""
        op = "list_records"
        definition = self._board_or_error(name, op=op)
        if isinstance(definition, ServiceResult):
            return definition

        rows = self._store.fetch(name, stage_field=definition.stage_field)
        items: list[dict[str, Any]] = [
            {
                "id": row["id"],
                "stage": row[definition.stage_field],
                "title": str(row.get(definition.title_field) or row["id"]),
            }
            for row in rows
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": definition.name, "count": len(items), "items": items},
        )

    def summary(self) -> ServiceResult:
        """Record counts per board, including registered boards with none."""
        counts = self._store.boards()
        items = [
            {"board": name, "count": counts.get(name, 0), "registered": True}
            for name in self._registry.names()
        ]
        items.extend(
            {"board": name, "count": count, "registered": False}
            for name, count in counts.items()
            if name not in self._registry
        )
        return ServiceResult(ok=True, op="list_boards", data={"items": items})
