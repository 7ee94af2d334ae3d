"""ルール定義関連のデータモデル。"""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Severity = Literal["error", "warning", "info"]
ProjectType = Literal["open_source", "internal"]
ProjectScope = Literal["small", "medium", "large"]

SCOPE_ORDER: dict[str, int] = {"small": 0, "medium": 1, "large": 2}


class BuiltinHandler(StrEnum):
    """builtinルールが参照できるハンドラ名。"""

    MODULE_DOCS_PLURAL = "module_docs_plural"
    MODULE_DOCS_NOT_BOTH = "module_docs_not_both"
    SDLC_PHASE_NUMBERING = "sdlc_phase_numbering"
    SDLC_PHASE_ORDER = "sdlc_phase_order"
    CHECKLIST_COMPLETENESS = "checklist_completeness"
    OPEN_SOURCE_COMMUNITY_FILES = "open_source_community_files"
    OPEN_SOURCE_GITHUB_TEMPLATES = "open_source_github_templates"
    TEMPLATES_POPULATED = "templates_populated"
    SNAKE_LOWER_CASE = "snake_lower_case"
    FILENAME_UNDERSCORES = "filename_underscores"
    FILENAME_NO_SPACES = "filename_no_spaces"
    GUIDE_NAMING = "guide_naming"
    TESTING_FILE_PLACEMENT = "testing_file_placement"
    TLDR_REQUIRED = "tldr_required"
    TLDR_UNNECESSARY = "tldr_unnecessary"
    GLOSSARY_FORMAT = "glossary_format"
    GLOSSARY_ALPHABETIZED = "glossary_alphabetized"
    GLOSSARY_ACRONYMS = "glossary_acronyms"
    W3H_HUB = "w3h_hub"
    HUB_LINKS_PHASES = "hub_links_phases"
    NO_DEEP_LINKS = "no_deep_links"
    LINK_RESOLUTION = "link_resolution"
    RELATIVE_LINK_RESOLUTION = "relative_link_resolution"
    ADR_NAMING = "adr_naming"
    ADR_INDEX_COMPLETENESS = "adr_index_completeness"
    PHASE_ARTIFACT_PRESENCE = "phase_artifact_presence"
    DESIGN_TRACES_REQUIREMENTS = "design_traces_requirements"
    PLAN_TRACES_DESIGN = "plan_traces_design"
    SPEC_SCHEMA_VALID = "spec_schema_valid"
    SPEC_CROSS_REFERENCES = "spec_cross_references"


class _Shape(BaseModel):
    model_config = ConfigDict(frozen=True)


class FileExists(_Shape):
    type: Literal["file_exists"]
    path: str


class DirExists(_Shape):
    type: Literal["dir_exists"]
    path: str


class DirNotExists(_Shape):
    type: Literal["dir_not_exists"]
    path: str
    message: str | None = None


class FileContentMatches(_Shape):
    type: Literal["file_content_matches"]
    path: str
    pattern: str


class FileContentNotMatches(_Shape):
    type: Literal["file_content_not_matches"]
    path: str
    pattern: str


class GlobContentMatches(_Shape):
    type: Literal["glob_content_matches"]
    glob: str
    pattern: str


class GlobContentNotMatches(_Shape):
    type: Literal["glob_content_not_matches"]
    glob: str
    pattern: str
    exclude_pattern: str | None = None


class GlobNamingMatches(_Shape):
    type: Literal["glob_naming_matches"]
    glob: str
    pattern: str


class GlobNamingNotMatches(_Shape):
    type: Literal["glob_naming_not_matches"]
    glob: str
    pattern: str
    exclude_paths: tuple[str, ...] = ()
    message: str | None = None


class ManifestKeyExists(_Shape):
    type: Literal["cargo_key_exists"]
    key: str
    manifest: str = "Cargo.toml"


class ManifestKeyMatches(_Shape):
    type: Literal["cargo_key_matches"]
    key: str
    pattern: str
    manifest: str = "Cargo.toml"


class Builtin(_Shape):
    type: Literal["builtin"]
    handler: BuiltinHandler


DeclarativeShape = (
    FileExists
    | DirExists
    | DirNotExists
    | FileContentMatches
    | FileContentNotMatches
    | GlobContentMatches
    | GlobContentNotMatches
    | GlobNamingMatches
    | GlobNamingNotMatches
    | ManifestKeyExists
    | ManifestKeyMatches
)

RuleShape = Annotated[DeclarativeShape | Builtin, Field(discriminator="type")]

SHAPE_TYPES: frozenset[str] = frozenset(
    {
        "file_exists",
        "dir_exists",
        "dir_not_exists",
        "file_content_matches",
        "file_content_not_matches",
        "glob_content_matches",
        "glob_content_not_matches",
        "glob_naming_matches",
        "glob_naming_not_matches",
        "cargo_key_exists",
        "cargo_key_matches",
        "builtin",
    }
)


class RuleDefinition(BaseModel):
    """ルール定義ドキュメントの1レコード。ロード後は不変。"""

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    category: str
    description: str
    severity: Severity
    shape: RuleShape
    applies_to: ProjectType | None = Field(
        default=None, validation_alias=AliasChoices("applies_to", "project_type")
    )
    scope: ProjectScope | None = None
    depends_on: tuple[int, ...] = ()


class RuleSet(BaseModel):
    """ロード済みのルール集合。rulesはトポロジカル実行順に並ぶ。"""

    model_config = ConfigDict(frozen=True)

    rules: tuple[RuleDefinition, ...]
    source: str = "<default>"

    def get(self, rule_id: int) -> RuleDefinition | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def __len__(self) -> int:
        return len(self.rules)
