"""
WatchCompile Compile Pass Orchestrator.

Mirrors a source tree into an output tree: recognized source files go
through a compiler backend, everything else is copied verbatim.
Requires Python 3.11+.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from compiler import BackendOptions, CompilerBackend, create_backend
from utils.config import Settings, get_settings
from utils.errors import CompileError, WatchCompileError
from utils.logger import LoggerMixin
from watcher.paths import PathClassifier, list_files
from watcher.reconciler import DeletedFileReconciler
from watcher.scheduler import PollingScheduler
from watcher.state import CompileState
from watcher.writer import OutputWriter

ChangeCallback = Callable[[list[str]], Any]


@dataclass(slots=True)
class WatchOptions:
    """
    Options for one watcher.

    Attributes:
        src_path: Source tree root
        out_path: Output tree root
        type: "ts" selects the TypeScript backend, anything else Babel
        log: Log a line per compiled file
        retain_lines: Keep original line numbers (Babel only)
        poll_interval_ms: Delay between the end of one pass and the next
        allowed_extensions: Extensions eligible for compilation
        ignore_patterns: Paths skipped when listing either tree
    """

    src_path: Path
    out_path: Path
    type: str = "babel"
    log: bool = False
    retain_lines: bool = True
    poll_interval_ms: int = 100
    allowed_extensions: tuple[str, ...] = (".js", ".ts")
    ignore_patterns: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_settings(
        cls,
        src_path: Path,
        out_path: Path,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> "WatchOptions":
        """Build options from settings, with keyword overrides."""
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "type": settings.compiler.type,
            "log": settings.watcher.log,
            "retain_lines": settings.compiler.retain_lines,
            "poll_interval_ms": settings.watcher.poll_interval_ms,
            "allowed_extensions": tuple(settings.compiler.allowed_extensions),
            "ignore_patterns": tuple(settings.watcher.ignore_patterns),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(src_path=Path(src_path), out_path=Path(out_path), **values)


class WatchCompiler(LoggerMixin):
    """
    Runs compile passes over a source tree.

    Each pass lists both trees, removes orphaned outputs, then visits
    every source file: copy-only files are always rewritten, recognized
    files are compiled when stale. A file's failure is recorded and the
    pass moves on.

    The changed-files list handed to the callback holds absolute output
    paths of deletions and successful compiles, in that order.
    """

    def __init__(
        self,
        options: WatchOptions,
        callback: ChangeCallback | None = None,
        backend: CompilerBackend | None = None,
        backend_options: BackendOptions | None = None,
    ) -> None:
        """
        Initialize the watcher.

        Args:
            options: Source/output roots and behaviour flags
            callback: Called with changed output paths after a pass
            backend: Backend to use instead of the one options.type selects
            backend_options: Options for the selected backend
        """
        self._options = options
        self._src_root = options.src_path
        self._callback = callback

        if backend is None:
            if backend_options is None:
                backend_options = BackendOptions.from_settings(get_settings().compiler)
            backend_options = replace(backend_options, retain_lines=options.retain_lines)
            backend = create_backend(options.type, backend_options)
        self._backend = backend

        self._classifier = PathClassifier(options.allowed_extensions)
        self._writer = OutputWriter(options.out_path)
        self._reconciler = DeletedFileReconciler(self._classifier, self._writer)
        self._state = CompileState()
        self._scheduler: PollingScheduler | None = None

    @property
    def backend(self) -> CompilerBackend:
        return self._backend

    @property
    def state(self) -> CompileState:
        return self._state

    @property
    def last_error(self) -> CompileError | None:
        """Most recent compile error; kept while any file is still failing."""
        return self._state.last_error

    @property
    def has_errors(self) -> bool:
        return self._state.has_errors

    @property
    def error_files(self) -> frozenset[str]:
        return self._state.error_files

    def set_callback(self, callback: ChangeCallback | None) -> None:
        """Set or update the change callback."""
        self._callback = callback

    def compile_pass(self) -> list[str]:
        """
        Run one full enumerate-reconcile-compile pass.

        Returns:
            Absolute output paths that were deleted or (re)compiled
        """
        ignore = self._options.ignore_patterns
        source_files = list_files(self._src_root, ignore)
        output_files = list_files(self._writer.root, ignore)

        changed = self._reconciler.reconcile(source_files, output_files)
        self._state.begin_pass()

        for rel_path in source_files:
            if not self._classifier.is_transpilable(rel_path):
                self._copy_file(rel_path)
                continue
            out_file = self._visit_source(rel_path)
            if out_file is not None:
                changed.append(out_file)

        if changed and self._callback is not None:
            self._notify(changed)
        return changed

    def invalidate(self, rel_path: str) -> None:
        """Force rel_path to be recompiled on the next pass."""
        self._state.invalidate(rel_path)

    def reset(self) -> None:
        """Forget all compile state."""
        self._state.reset()

    def start(self) -> PollingScheduler:
        """Start polling on a background thread."""
        if self._scheduler is None:
            self._scheduler = PollingScheduler(
                self.compile_pass, delay_ms=self._options.poll_interval_ms
            )
        self._scheduler.start()
        self.log.info(
            "watch_compile_started",
            src=str(self._src_root),
            out=str(self._writer.root),
            backend=self._backend.name,
        )
        return self._scheduler

    def stop(self) -> None:
        """Stop polling; the current pass is allowed to finish."""
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None

    def run_forever(self) -> None:
        """Poll on the calling thread until stop() is called from elsewhere."""
        self._scheduler = PollingScheduler(
            self.compile_pass, delay_ms=self._options.poll_interval_ms
        )
        self._scheduler.run_forever()

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_running

    def _copy_file(self, rel_path: str) -> None:
        try:
            data = (self._src_root / rel_path).read_bytes()
            # Empty content usually means the file is locked mid-write
            if not data:
                return
            self._writer.write_bytes(rel_path, data)
        except OSError as e:
            self.log.warning("copy_failed", file=rel_path, error=str(e))

    def _visit_source(self, rel_path: str) -> str | None:
        """Compile rel_path if stale; return its absolute output path on success."""
        src_file = self._src_root / rel_path
        try:
            mtime = src_file.stat().st_mtime_ns
        except OSError as e:
            # Removed between listing and stat; the next pass reconciles it
            self.log.debug("stat_failed", file=rel_path, error=str(e))
            return None

        out_rel = self._backend.output_path(rel_path)
        out_file = self._writer.root / out_rel
        try:
            if out_file.stat().st_mtime_ns > mtime:
                return None
        except OSError:
            # Missing, or a path component is a file; the write decides
            pass

        if not self._state.needs_compile(rel_path, mtime):
            return None

        try:
            compiled = self._compile_file(rel_path, out_rel)
        except (WatchCompileError, OSError, UnicodeDecodeError) as e:
            self.log.error("compile_failed", file=rel_path, error=str(e))
            self._state.record_failure(rel_path, mtime, CompileError.wrap(e, rel_path))
            return None

        if compiled is None:
            # Locked file: leave state alone so the next pass retries it
            return None

        self._state.record_success(rel_path, mtime)
        return self._writer.absolute(out_rel)

    def _compile_file(self, rel_path: str, out_rel: str) -> str | None:
        content = (self._src_root / rel_path).read_text(encoding="utf-8")
        if not content:
            return None

        start = time.perf_counter()
        result = self._backend.compile(content, rel_path)
        if self._options.log:
            self.log.info(
                "file_compiled",
                file=rel_path,
                backend=self._backend.name,
                elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
            )
        self._writer.write_text(out_rel, result)
        return out_rel

    def _notify(self, changed: list[str]) -> None:
        try:
            self._callback(list(changed))
        except Exception as e:
            self.log.error("change_callback_failed", error=str(e))
