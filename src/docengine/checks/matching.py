"""globパターンと正規表現のヘルパー。"""

import re
from functools import lru_cache

from docengine.storage.scanner import ProjectFiles


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """globパターンをプロジェクト相対POSIXパス用の正規表現に変換する。

    `**/` は0個以上のディレクトリ、それ以外の `**` は任意の文字列、
    `*` は区切り文字を含まない文字列、`?` は区切り文字以外の1文字に一致する。
    """
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif ch == "*":
            out.append("[^/]*")
            i += 1
        elif ch == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(ch))
            i += 1
    return re.compile("^" + "".join(out) + "$")


def glob_files(files: ProjectFiles, pattern: str) -> list[str]:
    """globに一致するファイルをソート順で返す。"""
    regex = glob_to_regex(pattern)
    return [f for f in files.files if regex.match(f)]


def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """正規表現をコンパイルする。不正なパターンの場合はNone。"""
    try:
        return re.compile(pattern, re.MULTILINE)
    except re.error:
        return None
