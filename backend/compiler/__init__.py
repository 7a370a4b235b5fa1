"""
WatchCompile Compiler Package.

Pluggable compiler backends, selected once at construction.
Requires Python 3.11+.
"""

from compiler.base import BackendOptions, CompilerBackend
from compiler.babel import BabelBackend
from compiler.typescript import TypeScriptBackend


def create_backend(kind: str, options: BackendOptions | None = None) -> CompilerBackend:
    """
    Create the backend for a compiler type.

    Args:
        kind: "ts" selects TypeScript; any other value selects Babel
        options: Options bound to the backend

    Returns:
        Configured backend instance
    """
    if kind == "ts":
        return TypeScriptBackend(options)
    return BabelBackend(options)


__all__ = [
    "BackendOptions",
    "CompilerBackend",
    "BabelBackend",
    "TypeScriptBackend",
    "create_backend",
]
