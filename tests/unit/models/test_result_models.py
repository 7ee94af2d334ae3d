"""結果モデルのユニットテスト。"""

import pytest
from pydantic import ValidationError

from docengine.models.results import (
    CheckEntry,
    Fail,
    Pass,
    ScanReport,
    Skip,
    Violation,
    summarize,
)
from docengine.models.specs import CrossRefReport


def _entry(check_id: int, result: Pass | Fail | Skip) -> CheckEntry:
    return CheckEntry(
        id=check_id, category="structure", description="d", severity="error", result=result
    )


class TestCheckResults:
    def test_result_discriminated_by_status(self) -> None:
        entry = CheckEntry.model_validate(
            {
                "id": 1,
                "category": "structure",
                "description": "d",
                "severity": "warning",
                "result": {"status": "skip", "reason": "n/a"},
            }
        )
        assert entry.result == Skip(reason="n/a")

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CheckEntry.model_validate(
                {
                    "id": 1,
                    "category": "c",
                    "description": "d",
                    "severity": "info",
                    "result": {"status": "maybe"},
                }
            )

    def test_fail_round_trips_through_json(self) -> None:
        violation = Violation(check_id=3, path="docs/README.md", message="missing", severity="error")
        entry = _entry(3, Fail(violations=(violation,)))
        restored = CheckEntry.model_validate_json(entry.model_dump_json())
        assert restored == entry

    def test_results_are_immutable(self) -> None:
        with pytest.raises(ValidationError):
            Skip(reason="a").reason = "b"  # type: ignore[misc]


class TestSummarize:
    def test_counts_by_status(self) -> None:
        violation = Violation(check_id=2, message="x", severity="error")
        entries = [
            _entry(1, Pass()),
            _entry(2, Fail(violations=(violation,))),
            _entry(3, Skip(reason="r")),
            _entry(4, Pass()),
        ]
        summary = summarize(entries)
        assert (summary.total, summary.passed, summary.failed, summary.skipped) == (4, 2, 1, 1)

    def test_has_failures(self) -> None:
        entries = [_entry(1, Pass()), _entry(2, Skip(reason="r"))]
        report = ScanReport(
            results=entries,
            summary=summarize(entries),
            project_type="internal",
            project_scope="large",
        )
        assert not report.has_failures
        assert report.model_dump(mode="json")["results"][1]["result"] == {
            "status": "skip",
            "reason": "r",
        }


class TestCrossRefReport:
    def test_failures_across_categories(self) -> None:
        report = CrossRefReport.model_validate(
            {
                "categories": {
                    "dependency": [{"status": "pass", "category": "dependency", "description": "a"}],
                    "sdlc_chain": [
                        {
                            "status": "fail",
                            "category": "sdlc_chain",
                            "description": "b",
                            "details": "missing",
                        }
                    ],
                },
                "passed": 1,
                "failed": 1,
                "total": 2,
            }
        )
        assert report.has_failures
        assert [f.details for f in report.failures()] == ["missing"]
