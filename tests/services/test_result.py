"""Tests for the ServiceResult contract."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from boardctl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="show_board")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("move_card", "UNKNOWN_STAGE", "nope", stages=["a"])
        assert not result.ok
        assert result.error == ServiceError(
            code="UNKNOWN_STAGE", message="nope", detail={"stages": ["a"]}
        )

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="x")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(ok=True, op="move_card", data={"id": "T-1"}, warnings=["w"])
        payload = json.loads(result.model_dump_json())
        assert payload["data"] == {"id": "T-1"}
        assert ServiceResult.model_validate(payload) == result
