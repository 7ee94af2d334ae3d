"""doc-engineのカスタム例外クラス。"""


class DocEngineError(Exception):
    """doc-engineの基底例外クラス。"""


class ProjectPathError(DocEngineError):
    """スキャン対象のプロジェクトルートが存在しない場合の例外。"""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path '{path}' does not exist or is not a directory")
        self.path = path


class RuleLoadError(DocEngineError):
    """ルール定義ドキュメントの読み込み・解析に失敗した場合の例外。"""

    def __init__(self, message: str, rule_id: int | None = None) -> None:
        if rule_id is not None:
            message = f"Rule {rule_id}: {message}"
        super().__init__(message)
        self.rule_id = rule_id


class UnknownHandlerError(RuleLoadError):
    """builtinルールが未登録のハンドラ名を指定した場合の例外。"""

    def __init__(self, handler: str, rule_id: int | None = None) -> None:
        super().__init__(f"unknown builtin handler '{handler}'", rule_id=rule_id)
        self.handler = handler


class CyclicDependencyError(RuleLoadError):
    """depends_onが循環している場合の例外。"""

    def __init__(self, rule_ids: list[int]) -> None:
        joined = ", ".join(str(i) for i in rule_ids)
        super().__init__(f"Cyclic depends_on between rules: {joined}")
        self.rule_ids = rule_ids


class FileReadError(DocEngineError):
    """プロジェクト内ファイルの読み込みエラー。"""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read '{path}': {reason}")
        self.path = path
        self.reason = reason


class CheckFilterError(DocEngineError):
    """チェックID指定（例: "1-5,9"）が不正な場合の例外。"""

    def __init__(self, expression: str) -> None:
        super().__init__(f"Invalid check filter '{expression}'")
        self.expression = expression
