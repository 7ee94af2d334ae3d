"""SpecServiceのユニットテスト。"""

from collections.abc import Callable
from pathlib import Path

import pytest

from docengine.models.errors import ProjectPathError
from docengine.services.spec import SpecService

ProjectFactory = Callable[[dict[str, str]], Path]

FEATURE = """\
kind: feature_request
schema_version: "1.0"
title: Login
id: AUTH-001
status: draft
priority: high
requirements:
  - id: REQ-001
    title: Password login
"""


@pytest.fixture
def service() -> SpecService:
    return SpecService()


class TestSpecService:
    def test_load_discovers_both_formats(
        self, service: SpecService, make_project: ProjectFactory
    ) -> None:
        root = make_project(
            {"docs/auth/login.spec.yaml": FEATURE, "docs/auth/login.arch": "# Arch\n"}
        )
        corpus = service.load(root)
        assert sorted(corpus.documents) == ["docs/auth/login.arch", "docs/auth/login.spec.yaml"]

    def test_validate(self, service: SpecService, make_project: ProjectFactory) -> None:
        root = make_project(
            {"docs/auth/login.spec.yaml": FEATURE, "docs/auth/broken.spec.yaml": "kind: [\n"}
        )
        report = service.validate(root)
        assert (report.total, report.valid, report.invalid) == (2, 1, 1)

    def test_cross_reference(self, service: SpecService, make_project: ProjectFactory) -> None:
        root = make_project(
            {
                "docs/1-requirements/auth/login.spec.yaml": FEATURE,
                "docs/3-design/auth/login.arch.yaml": "kind: architecture\nspec: AUTH-001\n",
            }
        )
        report = service.cross_reference(root)
        assert report.categories["arch_trace"][0].status == "pass"
        assert report.failed == 2

    def test_missing_root(self, service: SpecService, tmp_path: Path) -> None:
        with pytest.raises(ProjectPathError):
            service.validate(tmp_path / "missing")
