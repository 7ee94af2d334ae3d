"""プロジェクトファイル走査のユニットテスト。"""

from collections.abc import Callable
from pathlib import Path

import pytest

from docengine.models.errors import FileReadError, ProjectPathError
from docengine.storage.scanner import scan_project_files


class TestScanProjectFiles:
    def test_lists_sorted_relative_posix_paths(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        root = make_project({"b.md": "", "docs/a.md": "", "a.md": ""})
        files = scan_project_files(root)
        assert files.files == ["a.md", "b.md", "docs/a.md"]
        assert len(files) == 3

    def test_skips_hidden_and_build_directories(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        root = make_project(
            {
                "README.md": "",
                ".git/config": "",
                ".github/PULL_REQUEST_TEMPLATE.md": "",
                "target/debug/out.md": "",
                "node_modules/pkg/README.md": "",
                "src/__pycache__/x.pyc": "",
            }
        )
        assert scan_project_files(root).files == ["README.md"]

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ProjectPathError):
            scan_project_files(tmp_path / "missing")

    def test_file_root_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "file.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(ProjectPathError) as exc_info:
            scan_project_files(path)
        assert exc_info.value.path == str(path)


class TestProjectFiles:
    def test_existence_queries_use_listing(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        files = scan_project_files(make_project({"docs/1-requirements/a.md": ""}))
        assert files.is_dir("docs")
        assert files.is_dir("docs/1-requirements/")
        assert files.is_file("./docs/1-requirements/a.md")
        assert not files.is_file("docs")
        assert files.exists("docs/1-requirements")

    def test_hidden_paths_fall_back_to_stat(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        files = scan_project_files(make_project({".github/ISSUE_TEMPLATE/bug.md": ""}))
        assert files.is_dir(".github/ISSUE_TEMPLATE")
        assert files.is_file(".github/ISSUE_TEMPLATE/bug.md")

    def test_paths_outside_root_never_exist(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        files = scan_project_files(make_project({"a.md": ""}))
        assert not files.is_file("../outside.md")
        assert not files.is_dir("/etc")
        with pytest.raises(FileReadError):
            files.read_text("../outside.md")

    def test_subdirs_and_files_under(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        files = scan_project_files(
            make_project({"docs/2-planning/p.md": "", "docs/1-requirements/r.md": "", "docs/x.md": ""})
        )
        assert files.subdirs("docs") == ["1-requirements", "2-planning"]
        assert files.files_under("docs/2-planning") == ["docs/2-planning/p.md"]
        assert files.files_under("docs/2") == []

    def test_each_project_gets_its_own_root(
        self, make_project: Callable[[dict[str, str]], Path]
    ) -> None:
        first = make_project({"README.md": "x"})
        second = make_project({})
        assert first != second
        assert scan_project_files(second).files == []
        assert not scan_project_files(second).is_file("README.md")

    def test_read_text_is_cached(self, make_project: Callable[[dict[str, str]], Path]) -> None:
        root = make_project({"a.md": "first"})
        files = scan_project_files(root)
        assert files.read_text("a.md") == "first"
        (root / "a.md").write_text("second", encoding="utf-8")
        assert files.read_text("a.md") == "first"

    def test_read_missing_file_raises(self, make_project: Callable[[dict[str, str]], Path]) -> None:
        files = scan_project_files(make_project({}))
        with pytest.raises(FileReadError) as exc_info:
            files.read_text("missing.md")
        assert exc_info.value.path == "missing.md"
