"""ルール定義のデータだけで評価できる宣言的チェック。"""

import posixpath
import re
import tomllib
from typing import Any

from docengine.checks.base import Check, CheckContext
from docengine.checks.matching import compile_pattern, glob_files
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Fail, Pass, Skip, Violation
from docengine.models.rules import (
    DirExists,
    DirNotExists,
    FileContentMatches,
    FileContentNotMatches,
    FileExists,
    GlobContentMatches,
    GlobContentNotMatches,
    GlobNamingMatches,
    GlobNamingNotMatches,
    ManifestKeyExists,
    ManifestKeyMatches,
)


class DeclarativeCheck(Check):
    """ルール形状ごとに評価方法を切り替えるチェック。"""

    def run(self, context: CheckContext) -> CheckResult:
        shape = self.rule.shape
        files = context.files
        match shape:
            case FileExists(path=path):
                if files.is_file(path):
                    return Pass()
                return Fail(violations=(self.violation(path, f"File '{path}' does not exist"),))
            case DirExists(path=path):
                if files.is_dir(path):
                    return Pass()
                return Fail(violations=(self.violation(path, f"Directory '{path}' does not exist"),))
            case DirNotExists(path=path, message=message):
                if not files.is_dir(path):
                    return Pass()
                text = message or f"Directory '{path}' should not exist"
                return Fail(violations=(self.violation(path, text),))
            case FileContentMatches():
                return self._file_content(context, shape.path, shape.pattern, should_match=True)
            case FileContentNotMatches():
                return self._file_content(context, shape.path, shape.pattern, should_match=False)
            case GlobContentMatches():
                return self._glob_content_matches(context, shape)
            case GlobContentNotMatches():
                return self._glob_content_not_matches(context, shape)
            case GlobNamingMatches():
                return self._glob_naming_matches(context, shape)
            case GlobNamingNotMatches():
                return self._glob_naming_not_matches(context, shape)
            case ManifestKeyExists() | ManifestKeyMatches():
                return self._manifest_key(context, shape)
        return Skip(reason=f"Unsupported rule type '{shape.type}'")

    def _file_content(
        self, context: CheckContext, path: str, pattern: str, should_match: bool
    ) -> CheckResult:
        if not context.files.is_file(path):
            if should_match:
                return Skip(reason=f"File '{path}' does not exist")
            return Pass()
        try:
            content = context.files.read_text(path)
        except FileReadError as e:
            return Skip(reason=str(e))
        regex = compile_pattern(pattern)
        if regex is None:
            return Skip(reason=f"Invalid regex '{pattern}'")

        found = regex.search(content) is not None
        if found == should_match:
            return Pass()
        if should_match:
            message = f"File '{path}' does not match pattern '{pattern}'"
        else:
            message = f"File '{path}' contains forbidden pattern '{pattern}'"
        return Fail(violations=(self.violation(path, message),))

    def _glob_content_matches(self, context: CheckContext, shape: GlobContentMatches) -> CheckResult:
        regex = compile_pattern(shape.pattern)
        if regex is None:
            return Skip(reason=f"Invalid regex '{shape.pattern}'")

        violations: list[Violation] = []
        for path in glob_files(context.files, shape.glob):
            try:
                content = context.files.read_text(path)
            except FileReadError:
                continue
            if regex.search(content) is None:
                violations.append(
                    self.violation(path, f"File does not match pattern '{shape.pattern}'")
                )
        return self.outcome(violations)

    def _glob_content_not_matches(
        self, context: CheckContext, shape: GlobContentNotMatches
    ) -> CheckResult:
        regex = compile_pattern(shape.pattern)
        if regex is None:
            return Skip(reason=f"Invalid regex '{shape.pattern}'")
        exclude: re.Pattern[str] | None = None
        if shape.exclude_pattern is not None:
            exclude = compile_pattern(shape.exclude_pattern)
            if exclude is None:
                return Skip(reason=f"Invalid exclude regex '{shape.exclude_pattern}'")

        violations: list[Violation] = []
        for path in glob_files(context.files, shape.glob):
            try:
                content = context.files.read_text(path)
            except FileReadError:
                continue
            if _contains_forbidden(content, regex, exclude):
                violations.append(
                    self.violation(path, f"File contains forbidden pattern '{shape.pattern}'")
                )
        return self.outcome(violations)

    def _glob_naming_matches(self, context: CheckContext, shape: GlobNamingMatches) -> CheckResult:
        regex = compile_pattern(shape.pattern)
        if regex is None:
            return Skip(reason=f"Invalid regex '{shape.pattern}'")

        violations: list[Violation] = []
        for path in glob_files(context.files, shape.glob):
            filename = posixpath.basename(path)
            if regex.search(filename) is None:
                violations.append(
                    self.violation(
                        path, f"Filename '{filename}' does not match pattern '{shape.pattern}'"
                    )
                )
        return self.outcome(violations)

    def _glob_naming_not_matches(
        self, context: CheckContext, shape: GlobNamingNotMatches
    ) -> CheckResult:
        regex = compile_pattern(shape.pattern)
        if regex is None:
            return Skip(reason=f"Invalid regex '{shape.pattern}'")

        violations: list[Violation] = []
        for path in glob_files(context.files, shape.glob):
            if any(path.startswith(prefix) for prefix in shape.exclude_paths):
                continue
            filename = posixpath.basename(path)
            if regex.search(filename) is not None:
                message = shape.message or (
                    f"Filename '{filename}' matches forbidden pattern '{shape.pattern}'"
                )
                violations.append(self.violation(path, message))
        return self.outcome(violations)

    def _manifest_key(
        self, context: CheckContext, shape: ManifestKeyExists | ManifestKeyMatches
    ) -> CheckResult:
        manifest = shape.manifest
        if not context.files.is_file(manifest):
            return Skip(reason=f"Manifest '{manifest}' does not exist")
        try:
            data = tomllib.loads(context.files.read_text(manifest))
        except FileReadError as e:
            return Skip(reason=str(e))
        except tomllib.TOMLDecodeError as e:
            return Skip(reason=f"Cannot parse '{manifest}': {e}")

        found, value = _lookup_dotted(data, shape.key)
        if isinstance(shape, ManifestKeyExists):
            if found:
                return Pass()
            return Fail(
                violations=(self.violation(manifest, f"Key '{shape.key}' missing from '{manifest}'"),)
            )

        if not found:
            return Skip(reason=f"Key '{shape.key}' missing from '{manifest}'")
        regex = compile_pattern(shape.pattern)
        if regex is None:
            return Skip(reason=f"Invalid regex '{shape.pattern}'")
        text = value if isinstance(value, str) else str(value)
        if regex.search(text) is not None:
            return Pass()
        return Fail(
            violations=(
                self.violation(
                    manifest,
                    f"Key '{shape.key}' value '{text}' does not match pattern '{shape.pattern}'",
                ),
            )
        )


def _contains_forbidden(
    content: str, regex: re.Pattern[str], exclude: re.Pattern[str] | None
) -> bool:
    if exclude is None:
        return regex.search(content) is not None
    for line in content.splitlines():
        if exclude.search(line):
            continue
        if regex.search(line):
            return True
    return False


def _lookup_dotted(data: dict[str, Any], key: str) -> tuple[bool, Any]:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return False, None
        current = current[part]
    return True, current
