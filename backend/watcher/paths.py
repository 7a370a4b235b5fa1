"""
WatchCompile Path Handling.

Classifies source-relative paths and lists directory trees.
Requires Python 3.11+.
"""

import fnmatch
import os
import re
from collections.abc import Iterable
from pathlib import Path

_EXTENSION = re.compile(r"\.\w+$")


class PathClassifier:
    """
    Decides whether a relative path is transpilable or copy-only.

    Transpilable paths are those whose extension is one of the allowed
    extensions; everything else is mirrored verbatim.
    """

    def __init__(self, allowed_extensions: Iterable[str] = (".js", ".ts")) -> None:
        self._allowed = frozenset(allowed_extensions)

    @property
    def allowed_extensions(self) -> frozenset[str]:
        return self._allowed

    def is_transpilable(self, rel_path: str) -> bool:
        """Check if the path's extension is an allowed source extension."""
        return os.path.splitext(rel_path)[1] in self._allowed

    @staticmethod
    def stem(rel_path: str) -> str:
        """Path with its last extension removed."""
        return _EXTENSION.sub("", rel_path)


def _should_ignore(rel_path: str, ignore_patterns: Iterable[str]) -> bool:
    # Patterns match whole path components, so ".git" spares ".gitignore"
    parts = Path(rel_path).parts
    for pattern in ignore_patterns:
        if any(fnmatch.fnmatch(part, pattern) for part in parts):
            return True
    return False


def list_files(root: Path, ignore_patterns: Iterable[str] = ()) -> list[str]:
    """
    Recursively list regular files under root.

    Args:
        root: Directory to list
        ignore_patterns: Glob patterns matched against each path component

    Returns:
        Sorted paths relative to root, using the host separator.
        A missing root lists as empty.
    """
    if not root.is_dir():
        return []

    patterns = list(ignore_patterns)
    files: list[str] = []
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        rel_path = str(path.relative_to(root))
        if _should_ignore(rel_path, patterns):
            continue
        files.append(rel_path)
    return sorted(files)
