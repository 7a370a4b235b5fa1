"""
WatchCompile Output Writer.

Writes files into the output tree, creating parent directories on demand.
Requires Python 3.11+.
"""

import os
from pathlib import Path


class OutputWriter:
    """Writes and removes files addressed relative to the output root."""

    def __init__(self, out_root: Path) -> None:
        self._root = out_root

    @property
    def root(self) -> Path:
        return self._root

    def absolute(self, rel_path: str) -> str:
        """Normalized absolute path of an output-relative path."""
        return os.path.normpath(os.path.abspath(self._root / rel_path))

    def write_text(self, rel_path: str, text: str) -> Path:
        """Write text, fully overwriting any existing file."""
        path = self._prepare(rel_path)
        path.write_text(text, encoding="utf-8")
        return path

    def write_bytes(self, rel_path: str, data: bytes) -> Path:
        """Write bytes, fully overwriting any existing file."""
        path = self._prepare(rel_path)
        path.write_bytes(data)
        return path

    def remove(self, rel_path: str) -> str:
        """Delete an output file and return its absolute path."""
        absolute = self.absolute(rel_path)
        os.unlink(absolute)
        return absolute

    def _prepare(self, rel_path: str) -> Path:
        path = self._root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
