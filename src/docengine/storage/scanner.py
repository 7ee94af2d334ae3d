"""プロジェクトのファイル一覧とファイル内容アクセス層。"""

import logging
import os
import posixpath
from pathlib import Path

from docengine.models.errors import FileReadError, ProjectPathError

logger = logging.getLogger(__name__)

# 走査対象外のディレクトリ名 (隠しディレクトリは別途除外)
_SKIP_DIRS: frozenset[str] = frozenset({"target", "node_modules", "__pycache__"})


class ProjectFiles:
    """一度だけ走査したプロジェクトのファイル一覧と内容キャッシュ。

    全てのチェックとspecパイプラインはこのオブジェクトを共有し、
    ファイルシステムを再走査しない。パスは全てプロジェクトルートからの
    相対POSIXパスで扱う。
    """

    def __init__(self, root: Path, files: list[str]) -> None:
        self._root = root
        self._files = sorted(files)
        self._file_set = frozenset(self._files)
        self._dirs = _parent_dirs(self._files)
        self._cache: dict[str, str] = {}

    @property
    def root(self) -> Path:
        return self._root

    @property
    def files(self) -> list[str]:
        """ソート済みのファイル一覧。"""
        return list(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def is_file(self, path: str) -> bool:
        """ファイルの存在を確認する。一覧に無い場合のみstatで確認する。"""
        path = _normalize(path)
        if path in self._file_set:
            return True
        if _escapes_root(path):
            return False
        return (self._root / path).is_file()

    def is_dir(self, path: str) -> bool:
        """ディレクトリの存在を確認する。一覧に無い場合のみstatで確認する。"""
        path = _normalize(path)
        if path in ("", "."):
            return True
        if path in self._dirs:
            return True
        if _escapes_root(path):
            return False
        return (self._root / path).is_dir()

    def exists(self, path: str) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def files_under(self, directory: str) -> list[str]:
        """指定ディレクトリ配下（再帰）のファイル一覧を返す。"""
        directory = _normalize(directory)
        if directory in ("", "."):
            return self.files
        prefix = directory + "/"
        return [f for f in self._files if f.startswith(prefix)]

    def subdirs(self, directory: str) -> list[str]:
        """指定ディレクトリ直下のサブディレクトリ名をソートして返す。"""
        directory = _normalize(directory)
        prefix = "" if directory in ("", ".") else directory + "/"
        names = {
            d[len(prefix) :].split("/", 1)[0]
            for d in self._dirs
            if d.startswith(prefix) and d != directory
        }
        return sorted(n for n in names if n)

    def read_text(self, path: str) -> str:
        """ファイル内容を読み込む。結果はキャッシュされる。

        Raises:
            FileReadError: ファイルが存在しない、または読み込めない場合。
        """
        path = _normalize(path)
        if path in self._cache:
            return self._cache[path]
        if _escapes_root(path):
            raise FileReadError(path, "path is outside the project root")
        try:
            content = (self._root / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            raise FileReadError(path, str(e)) from e
        self._cache[path] = content
        return content


def scan_project_files(root: Path) -> ProjectFiles:
    """プロジェクトルートを一度だけ走査してファイル一覧を作成する。

    隠しディレクトリとビルド成果物ディレクトリは走査しない。

    Raises:
        ProjectPathError: ルートが存在しない、またはディレクトリでない場合。
    """
    if not root.is_dir():
        raise ProjectPathError(str(root))

    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".") and d not in _SKIP_DIRS]
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        for name in filenames:
            files.append(name if rel_dir == "." else f"{rel_dir}/{name}")

    logger.debug("Scanned %d files under %s", len(files), root)
    return ProjectFiles(root, files)


def _normalize(path: str) -> str:
    path = path.replace("\\", "/").strip()
    if path.startswith("./"):
        path = path[2:]
    normalized = posixpath.normpath(path) if path else ""
    return "" if normalized == "." else normalized.rstrip("/")


def _escapes_root(path: str) -> bool:
    return path.startswith(("/", "../")) or path == ".."


def _parent_dirs(files: list[str]) -> frozenset[str]:
    dirs: set[str] = set()
    for f in files:
        parent = posixpath.dirname(f)
        while parent and parent not in dirs:
            dirs.add(parent)
            parent = posixpath.dirname(parent)
    return frozenset(dirs)
