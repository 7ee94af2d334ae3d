"""specパーサーのユニットテスト。"""

from collections.abc import Callable
from pathlib import Path

from docengine.models import specs as spec_models
from docengine.specs.discovery import classify
from docengine.specs.parser import load_corpus, parse_yaml_spec
from docengine.storage.scanner import scan_project_files

ProjectFactory = Callable[[dict[str, str]], Path]


def _discovered(path: str) -> spec_models.DiscoveredSpec:
    discovered = classify(path)
    assert discovered is not None
    return discovered


class TestParseYamlSpec:
    def test_feature_request_with_camel_case_keys(self) -> None:
        text = (
            "kind: feature_request\nschemaVersion: 1.0\ntitle: Login\nid: AUTH-001\n"
            "status: draft\npriority: high\n"
            "requirements:\n  - id: REQ-001\n    title: Password login\n"
            "relatedDocuments: [../3-design/architecture.md]\n"
        )
        spec, diagnostics = parse_yaml_spec(_discovered("auth/login.spec.yaml"), text)
        assert diagnostics == []
        assert isinstance(spec, spec_models.FeatureRequestSpec)
        assert spec.schema_version == "1.0"
        assert spec.related_documents == ["../3-design/architecture.md"]
        assert spec.requirements is not None
        assert spec.requirements[0].id == "REQ-001"
        assert spec.origin is not None
        assert spec.origin.path == "auth/login.spec.yaml"

    def test_test_plan_accepts_test_alias(self) -> None:
        text = (
            "kind: test_plan\nschema_version: '1'\ntitle: Login tests\nspec: AUTH-001\n"
            "testCases:\n  - id: TC-001\n    test: Valid password\n    verifies: REQ-001\n"
        )
        spec, _ = parse_yaml_spec(_discovered("auth/login.test.yaml"), text)
        assert isinstance(spec, spec_models.TestSpec)
        assert spec.test_cases is not None
        assert spec.test_cases[0].description == "Valid password"

    def test_brd_domains(self) -> None:
        text = (
            "kind: brd\nschema_version: '1'\ntitle: BRD\n"
            "domains:\n  - name: auth\n    specCount: 1\n    specs:\n      - file: auth/login.spec.yaml\n"
        )
        spec, _ = parse_yaml_spec(_discovered("brd.spec.yaml"), text)
        assert isinstance(spec, spec_models.BrdSpec)
        assert spec.domains is not None
        assert spec.domains[0].spec_count == 1

    def test_syntax_error_reports_line(self) -> None:
        text = "kind: feature_request\ntitle: ok\nrequirements: [\n"
        spec, diagnostics = parse_yaml_spec(_discovered("a.spec.yaml"), text)
        assert spec is None
        assert len(diagnostics) == 1
        assert diagnostics[0].kind == "parse_error"
        assert diagnostics[0].line is not None

    def test_missing_kind_is_parse_error(self) -> None:
        spec, diagnostics = parse_yaml_spec(_discovered("a.spec.yaml"), "title: x\n")
        assert spec is None
        assert diagnostics[0].kind == "parse_error"
        assert diagnostics[0].message == "Missing required field 'kind'"

    def test_unknown_kind_is_parse_error(self) -> None:
        _, diagnostics = parse_yaml_spec(_discovered("a.spec.yaml"), "kind: novel\n")
        assert diagnostics[0].message == "Unknown spec kind 'novel'"

    def test_non_string_kind_is_parse_error(self) -> None:
        text = "kind: [feature_request]\ntitle: x\n"
        spec, diagnostics = parse_yaml_spec(_discovered("a.spec.yaml"), text)
        assert spec is None
        assert [d.kind for d in diagnostics] == ["parse_error"]
        assert diagnostics[0].message == "Unknown spec kind '['feature_request']'"

    def test_numeric_scalars_become_strings(self) -> None:
        text = (
            "kind: feature_request\nschema_version: 2\ntitle: 2024\nid: 7\n"
            "requirements:\n  - id: 1\n    title: First\n"
        )
        spec, diagnostics = parse_yaml_spec(_discovered("a.spec.yaml"), text)
        assert diagnostics == []
        assert isinstance(spec, spec_models.FeatureRequestSpec)
        assert (spec.schema_version, spec.title, spec.id) == ("2", "2024", "7")
        assert spec.requirements is not None
        assert spec.requirements[0].id == "1"

    def test_non_mapping_is_parse_error(self) -> None:
        _, diagnostics = parse_yaml_spec(_discovered("a.spec.yaml"), "- just\n- a list\n")
        assert diagnostics[0].kind == "parse_error"

    def test_type_mismatch_is_schema_error(self) -> None:
        text = "kind: brd\nschema_version: '1'\ntitle: BRD\ndomains: not-a-list\n"
        spec, diagnostics = parse_yaml_spec(_discovered("brd.spec.yaml"), text)
        assert spec is None
        assert diagnostics
        assert all(d.kind == "schema_error" for d in diagnostics)


class TestLoadCorpus:
    def test_parses_both_formats_and_collects_diagnostics(self, make_project: ProjectFactory) -> None:
        root = make_project(
            {
                "docs/a/login.spec.yaml": "kind: feature_request\ntitle: Login\n",
                "docs/a/login.arch": "# Arch\n**Version:** 1\n",
                "docs/a/broken.spec.yaml": "kind: [\n",
                "docs/README.md": "not a spec",
            }
        )
        corpus = load_corpus(scan_project_files(root))
        assert [d.path for d in corpus.discovered] == [
            "docs/a/broken.spec.yaml",
            "docs/a/login.arch",
            "docs/a/login.spec.yaml",
        ]
        assert set(corpus.documents) == {"docs/a/login.arch", "docs/a/login.spec.yaml"}
        assert [d.file for d in corpus.diagnostics] == ["docs/a/broken.spec.yaml"]
        assert len(corpus.of_kind("architecture", "markdown")) == 1
        assert corpus.of_kind("architecture", "yaml") == []

    def test_unreadable_spec_becomes_diagnostic(self, make_project: ProjectFactory) -> None:
        root = make_project({"docs/a.spec": "# A\n"})
        (root / "docs" / "a.spec").write_bytes(b"\xff\xfe bad")
        corpus = load_corpus(scan_project_files(root))
        assert corpus.documents == {}
        assert corpus.diagnostics[0].kind == "parse_error"
        assert "docs/a.spec" in corpus.diagnostics[0].message
