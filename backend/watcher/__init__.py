"""
WatchCompile Watcher Package.

Poll-based incremental compilation of a source tree into an output tree.
Requires Python 3.11+.
"""

from watcher.compile_watcher import WatchCompiler, WatchOptions
from watcher.paths import PathClassifier, list_files
from watcher.reconciler import DeletedFileReconciler
from watcher.scheduler import AsyncPollingScheduler, PollingScheduler
from watcher.state import CompileState
from watcher.writer import OutputWriter

__all__ = [
    "WatchCompiler",
    "WatchOptions",
    "PathClassifier",
    "list_files",
    "DeletedFileReconciler",
    "PollingScheduler",
    "AsyncPollingScheduler",
    "CompileState",
    "OutputWriter",
]
