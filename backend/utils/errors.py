"""
WatchCompile Error Hierarchy.

All watcher-specific errors inherit from WatchCompileError.
Requires Python 3.11+.
"""


class WatchCompileError(Exception):
    """Base error for all watch-compile operations."""


class DiagnosticError(WatchCompileError):
    """A compiler backend rejected a source file."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        line: int | None = None,
        character: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.line = line
        self.character = character


class BackendError(DiagnosticError):
    """The compiler backend could not run (missing toolchain, crash, timeout)."""


class CompileError(WatchCompileError):
    """
    Most recent per-file compile failure, as exposed to callers.

    The message carries a fixed "Compile Error: " prefix; the underlying
    exception is chained as __cause__.
    """

    PREFIX = "Compile Error: "

    def __init__(self, message: str, file: str) -> None:
        super().__init__(f"{self.PREFIX}{message}")
        self.file = file

    @classmethod
    def wrap(cls, error: Exception, file: str) -> "CompileError":
        """Build a CompileError from the exception raised while compiling file."""
        wrapped = cls(str(error), file)
        wrapped.__cause__ = error
        return wrapped
