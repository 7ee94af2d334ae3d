"""specファイルの検証と相互参照を行うサービス。"""

from pathlib import Path

from docengine.models.specs import CrossRefReport, SpecValidationReport
from docengine.specs.crossref import cross_reference
from docengine.specs.parser import SpecCorpus, load_corpus
from docengine.storage.scanner import scan_project_files
from docengine.validators.spec import SpecValidator


class SpecService:
    """プロジェクト内のspecファイルを検出・解析・検証する。"""

    def __init__(self) -> None:
        self._validator = SpecValidator()

    def load(self, root: Path) -> SpecCorpus:
        """プロジェクトを走査してspec一式を解析する。

        Raises:
            ProjectPathError: rootがディレクトリでない場合。
        """
        return load_corpus(scan_project_files(root))

    def validate(self, root: Path) -> SpecValidationReport:
        """全specファイルのスキーマ検証とID重複検出を行う。"""
        return self._validator.report(self.load(root))

    def cross_reference(self, root: Path) -> CrossRefReport:
        """全specファイルの相互参照チェックを行う。"""
        return cross_reference(self.load(root))
