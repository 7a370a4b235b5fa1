"""
WatchCompile Per-File Compile State.

Tracks the last processed mtime of each source file, which files are
currently failing, and the most recent compile error.
Requires Python 3.11+.
"""

from utils.errors import CompileError


class CompileState:
    """
    Compile bookkeeping owned by a single watcher.

    Nothing here is persisted; a new process starts from an empty record
    and relies on output-file mtimes to avoid redundant work.
    """

    def __init__(self) -> None:
        # Cache: source-relative path -> st_mtime_ns when last processed
        self._records: dict[str, int] = {}
        self._errors: set[str] = set()
        self._last_error: CompileError | None = None

    def begin_pass(self) -> None:
        """Clear the last error, unless some file is still failing."""
        if not self._errors:
            self._last_error = None

    def needs_compile(self, rel_path: str, mtime: int) -> bool:
        """Check if rel_path has not yet been processed at mtime or later."""
        recorded = self._records.get(rel_path)
        return recorded is None or recorded < mtime

    def record_success(self, rel_path: str, mtime: int) -> None:
        self._records[rel_path] = mtime
        self._errors.discard(rel_path)

    def record_failure(self, rel_path: str, mtime: int, error: CompileError) -> None:
        # A failed attempt still marks this mtime as visited
        self._records[rel_path] = mtime
        self._errors.add(rel_path)
        self._last_error = error

    def recorded_mtime(self, rel_path: str) -> int | None:
        return self._records.get(rel_path)

    def invalidate(self, rel_path: str) -> None:
        """Forget rel_path's record so the next pass recompiles it."""
        self._records.pop(rel_path, None)

    def reset(self) -> None:
        """Forget all records, errors and the last error."""
        self._records.clear()
        self._errors.clear()
        self._last_error = None

    @property
    def last_error(self) -> CompileError | None:
        return self._last_error

    @property
    def error_files(self) -> frozenset[str]:
        return frozenset(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)
