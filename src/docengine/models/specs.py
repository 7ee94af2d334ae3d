"""specファイル（YAML/Markdown）関連のデータモデル。"""

import posixpath
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

SpecFormat = Literal["yaml", "markdown"]
SpecKind = Literal["brd", "feature_request", "architecture", "test_plan", "deployment"]
DiagnosticKind = Literal["parse_error", "schema_error", "cross_ref_error"]
CrossRefCategory = Literal[
    "dependency", "sdlc_chain", "inventory", "test_trace", "arch_trace", "related_docs"
]

CROSS_REF_CATEGORIES: tuple[CrossRefCategory, ...] = (
    "dependency",
    "sdlc_chain",
    "inventory",
    "test_trace",
    "arch_trace",
    "related_docs",
)


class DiscoveredSpec(BaseModel):
    """ファイル一覧から発見されたspecファイル。"""

    model_config = ConfigDict(frozen=True)

    path: str
    format: SpecFormat
    kind: SpecKind
    stem: str

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)


class SpecDiagnostic(BaseModel):
    """specファイルの解析・検証で検出された問題。"""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int | None = None
    kind: DiagnosticKind
    message: str


# --- YAML schema ---


def _scalar_to_str(value: Any) -> Any:
    # YAMLでは `id: 1` や `schema_version: 1.0` が数値になるため文字列に揃える
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return value


YamlText = Annotated[str | None, BeforeValidator(_scalar_to_str)]


class _YamlModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Dependency(_YamlModel):
    """他specへの依存宣言。"""

    ref: YamlText = None
    file: YamlText = None


class BrdSpecEntry(_YamlModel):
    """BRDのドメインに列挙されたspecファイル。"""

    file: YamlText = None
    id: YamlText = None
    title: YamlText = None


class BrdDomain(_YamlModel):
    """BRDのドメインインベントリ。"""

    name: YamlText = None
    spec_count: int | None = None
    specs: list[BrdSpecEntry] | None = None
    path: YamlText = None


class Requirement(_YamlModel):
    """feature requestの個別要件。"""

    id: YamlText = None
    title: YamlText = None
    description: YamlText = None
    priority: YamlText = None
    acceptance: YamlText = None


class ArchComponent(_YamlModel):
    """アーキテクチャのコンポーネント。"""

    name: YamlText = None
    traces_to: YamlText = None
    description: YamlText = None


class TestCase(_YamlModel):
    """テストプランのテストケース。"""

    id: YamlText = None
    description: YamlText = Field(
        default=None, validation_alias=AliasChoices("description", "test")
    )
    verifies: YamlText = None


class Environment(_YamlModel):
    """デプロイ先環境。"""

    name: YamlText = None
    description: YamlText = None


class _YamlSpec(_YamlModel):
    schema_version: YamlText = None
    title: YamlText = None
    id: YamlText = None
    dependencies: list[Dependency] = Field(default_factory=list)
    related_documents: list[str] = Field(default_factory=list)
    origin: DiscoveredSpec | None = None


class BrdSpec(_YamlSpec):
    """ビジネス要件ドキュメント（ドメインインベントリ）。"""

    kind: Literal["brd"]
    domains: list[BrdDomain] | None = None


class FeatureRequestSpec(_YamlSpec):
    """機能要求spec。"""

    kind: Literal["feature_request"]
    status: YamlText = None
    priority: YamlText = None
    requirements: list[Requirement] | None = None


class ArchSpec(_YamlSpec):
    """アーキテクチャspec。"""

    kind: Literal["architecture"]
    spec: YamlText = None
    components: list[ArchComponent] | None = None


class TestSpec(_YamlSpec):
    """テストプランspec。"""

    kind: Literal["test_plan"]
    spec: YamlText = None
    test_cases: list[TestCase] | None = None


class DeploySpec(_YamlSpec):
    """デプロイメントspec。"""

    kind: Literal["deployment"]
    spec: YamlText = None
    environments: list[Environment] | None = None


YamlSpec = Annotated[
    BrdSpec | FeatureRequestSpec | ArchSpec | TestSpec | DeploySpec,
    Field(discriminator="kind"),
]


# --- Markdown ---


class MarkdownLink(BaseModel):
    """`[text](target)` 形式のリンク。パス表記のみの場合はtextとtargetが同じ。"""

    model_config = ConfigDict(frozen=True)

    text: str
    target: str


class TestCaseRow(BaseModel):
    """Markdownテーブルから抽出したテストケース行。"""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    verifies: str
    line: int


class InventoryRow(BaseModel):
    """Markdown BRDのドメインインベントリ行。"""

    model_config = ConfigDict(frozen=True)

    domain: str
    count: int | None = None
    links: tuple[MarkdownLink, ...] = ()
    line: int


class MarkdownSpec(BaseModel):
    """Markdown specから抽出したメタデータ。欠落フィールドはNone。"""

    origin: DiscoveredSpec
    title: str | None = None
    version: str | None = None
    status: str | None = None
    related: str | None = None
    spec_link: MarkdownLink | None = None
    arch_link: MarkdownLink | None = None
    requirements: str | None = None
    requirement_ids: list[str] = Field(default_factory=list)
    test_cases: list[TestCaseRow] = Field(default_factory=list)
    inventory: list[InventoryRow] = Field(default_factory=list)


ParsedSpec = BrdSpec | FeatureRequestSpec | ArchSpec | TestSpec | DeploySpec | MarkdownSpec


# --- Reports ---


class SpecValidationReport(BaseModel):
    """spec検証結果。診断は文書とは別に保持する。"""

    files: list[DiscoveredSpec]
    diagnostics: list[SpecDiagnostic]
    total: int
    valid: int
    invalid: int

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)


class CrossRefPass(BaseModel):
    """成立した相互参照アサーション。"""

    model_config = ConfigDict(frozen=True)

    status: Literal["pass"] = "pass"
    category: CrossRefCategory
    description: str


class CrossRefFail(BaseModel):
    """成立しなかった相互参照アサーション。"""

    model_config = ConfigDict(frozen=True)

    status: Literal["fail"] = "fail"
    category: CrossRefCategory
    description: str
    details: str


CrossRefResult = Annotated[CrossRefPass | CrossRefFail, Field(discriminator="status")]


class CrossRefReport(BaseModel):
    """カテゴリ別の相互参照結果。"""

    categories: dict[CrossRefCategory, list[CrossRefResult]]
    passed: int
    failed: int
    total: int

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def failures(self) -> list[CrossRefFail]:
        return [
            r
            for results in self.categories.values()
            for r in results
            if isinstance(r, CrossRefFail)
        ]
