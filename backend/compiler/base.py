"""
WatchCompile Compiler Backend Interface.

A backend turns the text of one source file into transformed text, or
raises DiagnosticError. Backends never touch the output tree.
Requires Python 3.11+.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from utils.config import CompilerSettings


@dataclass(slots=True)
class BackendOptions:
    """Options bound to a backend when it is constructed."""

    node_binary: str = "node"
    project_root: Path | None = None
    timeout_seconds: float | None = None

    # TypeScript
    ts_target: str = "ES5"
    ts_module: str = "CommonJS"

    # Babel-style transform
    retain_lines: bool = True
    babel_presets: list[str] = field(default_factory=lambda: ["@babel/preset-env"])
    babel_plugins: list[str] = field(
        default_factory=lambda: ["@babel/plugin-transform-runtime"]
    )
    babel_loose: bool = True

    @classmethod
    def from_settings(cls, settings: CompilerSettings) -> "BackendOptions":
        """Build options from the COMPILER_* settings."""
        return cls(
            node_binary=settings.node_binary,
            project_root=settings.project_root,
            timeout_seconds=settings.timeout_seconds,
            ts_target=settings.ts_target,
            ts_module=settings.ts_module,
            retain_lines=settings.retain_lines,
            babel_presets=list(settings.babel_presets),
            babel_plugins=list(settings.babel_plugins),
            babel_loose=settings.babel_loose,
        )


class CompilerBackend(ABC):
    """Capability interface shared by the TypeScript and Babel-style backends."""

    name: str = "backend"

    def __init__(self, options: BackendOptions | None = None) -> None:
        self._options = options or BackendOptions()

    @property
    def options(self) -> BackendOptions:
        return self._options

    @abstractmethod
    def compile(self, content: str, filename: str) -> str:
        """
        Transform the content of one source file.

        Args:
            content: Source text
            filename: Source-relative path, used in diagnostics

        Returns:
            Transformed text

        Raises:
            DiagnosticError: If the backend rejects the source
        """

    def output_path(self, rel_path: str) -> str:
        """Output-relative path for a compiled source path."""
        return rel_path
