"""Tests for output mode selection."""

from __future__ import annotations

import json

from chronoform.output.formatters import format_result
from chronoform.services.result import ServiceResult

RESULT = ServiceResult(
    ok=True,
    op="apply_static",
    data={
        "address": "stamp",
        "action": "create",
        "attributes": {"id": "2023-07-25T00:00:00Z", "rfc3339": "2023-07-25T00:00:00Z"},
    },
)


class TestFormatResult:
    def test_json(self) -> None:
        parsed = json.loads(format_result(RESULT, json_output=True))
        assert parsed["ok"] is True
        assert parsed["op"] == "apply_static"
        assert parsed["data"]["attributes"]["id"] == "2023-07-25T00:00:00Z"
        assert parsed["error"] is None

    def test_json_wins_over_quiet(self) -> None:
        assert format_result(RESULT, json_output=True, quiet=True).startswith("{")

    def test_quiet(self) -> None:
        assert format_result(RESULT, quiet=True) == "2023-07-25T00:00:00Z"

    def test_rich(self) -> None:
        assert format_result(RESULT).startswith("OK  apply_static")
