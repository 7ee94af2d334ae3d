"""ScanServiceのユニットテスト。"""

from collections.abc import Callable
from pathlib import Path

import pytest

from docengine.models.errors import CheckFilterError, ProjectPathError, RuleLoadError
from docengine.models.results import Fail, Pass, Skip
from docengine.models.rules import RuleSet
from docengine.services.scan import (
    ScanConfig,
    ScanService,
    detect_project_type,
    parse_check_filter,
)
from docengine.storage.scanner import scan_project_files

ProjectFactory = Callable[[dict[str, str]], Path]

SMALL_RULES = """\
rules:
  - id: 1
    category: structure
    description: docs/ directory exists
    severity: error
    type: dir_exists
    path: docs
  - id: 2
    category: structure
    description: Hub README exists
    severity: error
    type: file_exists
    path: docs/README.md
    depends_on: [1]
  - id: 3
    category: open_source
    description: LICENSE exists
    severity: warning
    type: file_exists
    path: LICENSE
    applies_to: open_source
"""


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(SMALL_RULES, encoding="utf-8")
    return path


class TestParseCheckFilter:
    def test_ranges_and_singles(self) -> None:
        assert parse_check_filter("1-5,9") == [1, 2, 3, 4, 5, 9]

    def test_sorted_and_deduplicated(self) -> None:
        assert parse_check_filter("9, 3-4, 3") == [3, 4, 9]

    @pytest.mark.parametrize("expression", ["", ",", "abc", "5-1", "1-x", "-3"])
    def test_invalid_expressions(self, expression: str) -> None:
        with pytest.raises(CheckFilterError, match="Invalid check filter"):
            parse_check_filter(expression)


class TestDetectProjectType:
    def test_mit_license_is_open_source(self, make_project: ProjectFactory) -> None:
        root = make_project({"LICENSE": "MIT License\n\nCopyright (c) 2024\n"})
        assert detect_project_type(scan_project_files(root)) == "open_source"

    def test_apache_license_md(self, make_project: ProjectFactory) -> None:
        root = make_project({"LICENSE.md": "Apache License\nVersion 2.0\n"})
        assert detect_project_type(scan_project_files(root)) == "open_source"

    def test_no_license_is_internal(self, make_project: ProjectFactory) -> None:
        root = make_project({"README.md": "# x\n"})
        assert detect_project_type(scan_project_files(root)) == "internal"

    def test_proprietary_license_is_internal(self, make_project: ProjectFactory) -> None:
        root = make_project({"LICENSE": "All rights reserved. Proprietary and confidential.\n"})
        assert detect_project_type(scan_project_files(root)) == "internal"


class TestScanService:
    def test_scan_with_rules_override(
        self, make_project: ProjectFactory, default_rules: RuleSet, rules_file: Path
    ) -> None:
        root = make_project({"README.md": "# x\n"})
        report = ScanService(default_rules).scan(root, ScanConfig(rules_path=rules_file))

        assert [e.id for e in report.results] == [1, 2, 3]
        results = {e.id: e.result for e in report.results}
        assert isinstance(results[1], Fail)
        assert results[2] == Skip(reason="dependency check 1 failed")
        assert isinstance(results[3], Skip)
        assert report.project_type == "internal"
        assert (report.summary.total, report.summary.failed, report.summary.skipped) == (3, 1, 2)
        assert report.has_failures

    def test_explicit_project_type_overrides_detection(
        self, make_project: ProjectFactory, rules_file: Path
    ) -> None:
        root = make_project({"docs/README.md": "# Docs\n"})
        service = ScanService(RuleSet(rules=()))
        report = service.scan(
            root, ScanConfig(project_type="open_source", rules_path=rules_file)
        )
        results = {e.id: e.result for e in report.results}
        assert isinstance(results[1], Pass)
        assert isinstance(results[2], Pass)
        assert isinstance(results[3], Fail)
        assert report.project_type == "open_source"

    def test_check_selection(self, make_project: ProjectFactory, rules_file: Path) -> None:
        root = make_project({"README.md": "# x\n"})
        service = ScanService(RuleSet(rules=()))
        report = service.scan(root, ScanConfig(checks=[2], rules_path=rules_file))
        # 選択外の前提チェックは依存チェックを妨げない
        assert [e.id for e in report.results] == [2]
        assert isinstance(report.results[0].result, Fail)

    def test_missing_root(self, tmp_path: Path, default_rules: RuleSet) -> None:
        with pytest.raises(ProjectPathError):
            ScanService(default_rules).scan(tmp_path / "nope")

    def test_bad_rules_path(self, make_project: ProjectFactory, tmp_path: Path) -> None:
        root = make_project({})
        service = ScanService(RuleSet(rules=()))
        with pytest.raises(RuleLoadError):
            service.scan(root, ScanConfig(rules_path=tmp_path / "missing.yaml"))

    def test_default_rules_on_empty_project(
        self, make_project: ProjectFactory, default_rules: RuleSet
    ) -> None:
        root = make_project({"README.md": "# Project\n"})
        report = ScanService(default_rules).scan(root)

        summary = report.summary
        assert summary.total == len(default_rules)
        assert summary.passed + summary.failed + summary.skipped == summary.total
        results = {e.id: e.result for e in report.results}
        assert isinstance(results[1], Fail)
        assert isinstance(results[2], Pass)
        assert results[3] == Skip(reason="dependency check 1 failed")
        assert results[47] == Skip(reason="No spec files found")

    def test_small_scope_skips_larger_rules(
        self, make_project: ProjectFactory, default_rules: RuleSet
    ) -> None:
        root = make_project({"README.md": "# Project\n", "docs/README.md": "# Docs\n"})
        report = ScanService(default_rules).scan(root, ScanConfig(project_scope="small"))
        results = {e.id: e.result for e in report.results}
        assert results[4] == Skip(reason="Skipped: requires medium scope (configured small)")
        assert report.project_scope == "small"
