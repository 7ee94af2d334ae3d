"""ルール定義からチェックを生成するレジストリ。"""

from docengine.checks.base import Check
from docengine.checks.builtins import (
    adr,
    content,
    links,
    naming,
    navigation,
    specs,
    structure,
    traceability,
)
from docengine.checks.declarative import DeclarativeCheck
from docengine.models.errors import UnknownHandlerError
from docengine.models.rules import Builtin, BuiltinHandler, RuleDefinition, RuleSet

# builtinハンドラ → 実装クラス
HANDLERS: dict[BuiltinHandler, type[Check]] = {
    BuiltinHandler.MODULE_DOCS_PLURAL: structure.ModuleDocsPlural,
    BuiltinHandler.MODULE_DOCS_NOT_BOTH: structure.ModuleDocsNotBoth,
    BuiltinHandler.SDLC_PHASE_NUMBERING: structure.SdlcPhaseNumbering,
    BuiltinHandler.SDLC_PHASE_ORDER: structure.SdlcPhaseOrder,
    BuiltinHandler.CHECKLIST_COMPLETENESS: structure.ChecklistCompleteness,
    BuiltinHandler.OPEN_SOURCE_COMMUNITY_FILES: structure.OpenSourceCommunityFiles,
    BuiltinHandler.OPEN_SOURCE_GITHUB_TEMPLATES: structure.OpenSourceGithubTemplates,
    BuiltinHandler.TEMPLATES_POPULATED: structure.TemplatesPopulated,
    BuiltinHandler.SNAKE_LOWER_CASE: naming.SnakeLowerCase,
    BuiltinHandler.FILENAME_UNDERSCORES: naming.FilenameUnderscores,
    BuiltinHandler.FILENAME_NO_SPACES: naming.FilenameNoSpaces,
    BuiltinHandler.GUIDE_NAMING: naming.GuideNaming,
    BuiltinHandler.TESTING_FILE_PLACEMENT: naming.TestingFilePlacement,
    BuiltinHandler.TLDR_REQUIRED: content.TldrRequired,
    BuiltinHandler.TLDR_UNNECESSARY: content.TldrUnnecessary,
    BuiltinHandler.GLOSSARY_FORMAT: content.GlossaryFormat,
    BuiltinHandler.GLOSSARY_ALPHABETIZED: content.GlossaryAlphabetized,
    BuiltinHandler.GLOSSARY_ACRONYMS: content.GlossaryAcronyms,
    BuiltinHandler.W3H_HUB: navigation.W3hHub,
    BuiltinHandler.HUB_LINKS_PHASES: navigation.HubLinksPhases,
    BuiltinHandler.NO_DEEP_LINKS: navigation.NoDeepLinks,
    BuiltinHandler.LINK_RESOLUTION: links.LinkResolution,
    BuiltinHandler.RELATIVE_LINK_RESOLUTION: links.RelativeLinkResolution,
    BuiltinHandler.ADR_NAMING: adr.AdrNaming,
    BuiltinHandler.ADR_INDEX_COMPLETENESS: adr.AdrIndexCompleteness,
    BuiltinHandler.PHASE_ARTIFACT_PRESENCE: traceability.PhaseArtifactPresence,
    BuiltinHandler.DESIGN_TRACES_REQUIREMENTS: traceability.DesignTracesRequirements,
    BuiltinHandler.PLAN_TRACES_DESIGN: traceability.PlanTracesDesign,
    BuiltinHandler.SPEC_SCHEMA_VALID: specs.SpecSchemaValid,
    BuiltinHandler.SPEC_CROSS_REFERENCES: specs.SpecCrossReferences,
}


def create_check(rule: RuleDefinition) -> Check:
    """ルール定義1件に対応するチェックを生成する。

    Raises:
        UnknownHandlerError: builtinハンドラが登録されていない場合。
    """
    if isinstance(rule.shape, Builtin):
        check_class = HANDLERS.get(rule.shape.handler)
        if check_class is None:
            raise UnknownHandlerError(str(rule.shape.handler), rule_id=rule.id)
        return check_class(rule)
    return DeclarativeCheck(rule)


def build_checks(rule_set: RuleSet) -> list[Check]:
    """RuleSetの実行順にチェックを生成する。"""
    return [create_check(rule) for rule in rule_set.rules]
