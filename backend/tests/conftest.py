"""
WatchCompile Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import os
import re
from collections.abc import Callable
from pathlib import Path

import pytest

from compiler.base import CompilerBackend
from utils.errors import DiagnosticError
from watcher.compile_watcher import WatchCompiler, WatchOptions


class FakeBackend(CompilerBackend):
    """In-process backend: fails on "syntax error", otherwise tags the text."""

    name = "Fake"

    def __init__(self, rewrite_ts: bool = True) -> None:
        super().__init__()
        self._rewrite_ts = rewrite_ts
        self.calls: list[str] = []

    def compile(self, content: str, filename: str) -> str:
        self.calls.append(filename)
        if "syntax error" in content:
            raise DiagnosticError("Unexpected token on Line 1, Character 0", filename, 1, 0)
        return f"// compiled\n{content}"

    def output_path(self, rel_path: str) -> str:
        if self._rewrite_ts:
            return re.sub(r"\.ts$", ".js", rel_path)
        return rel_path


def set_mtime(path: Path, mtime_ns: int) -> None:
    """Set both atime and mtime of path."""
    os.utime(path, ns=(mtime_ns, mtime_ns))


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    """Empty source tree."""
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Empty output tree."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Backend that never shells out."""
    return FakeBackend()


@pytest.fixture
def make_watcher(
    src_dir: Path, out_dir: Path, fake_backend: FakeBackend
) -> Callable[..., WatchCompiler]:
    """Factory for watchers over src_dir/out_dir using the fake backend."""

    def _make(callback=None, **option_overrides) -> WatchCompiler:
        options = WatchOptions(src_path=src_dir, out_path=out_dir, **option_overrides)
        return WatchCompiler(options, callback=callback, backend=fake_backend)

    return _make
