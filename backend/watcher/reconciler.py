"""
WatchCompile Deleted-File Reconciler.

Removes compiled output files whose source file no longer exists.
Requires Python 3.11+.
"""

from watcher.paths import PathClassifier
from watcher.writer import OutputWriter
from utils.logger import LoggerMixin


class DeletedFileReconciler(LoggerMixin):
    """
    Keeps the output tree consistent with deletions in the source tree.

    Source and output files are matched by stem, so ``lib/a.ts`` keeps
    ``lib/a.js`` alive. Output files with extensions outside the allowed
    set are never removed.
    """

    def __init__(self, classifier: PathClassifier, writer: OutputWriter) -> None:
        self._classifier = classifier
        self._writer = writer

    def find_orphans(self, source_files: list[str], output_files: list[str]) -> list[str]:
        """
        Find output files with no source counterpart.

        Args:
            source_files: Source-relative paths
            output_files: Output-relative paths

        Returns:
            Output-relative paths to delete, in output order
        """
        source_stems = {self._classifier.stem(f) for f in source_files}
        return [
            f
            for f in output_files
            if self._classifier.is_transpilable(f)
            and self._classifier.stem(f) not in source_stems
        ]

    def reconcile(self, source_files: list[str], output_files: list[str]) -> list[str]:
        """
        Delete orphaned output files.

        A removal that fails is logged and left for the next pass.

        Returns:
            Absolute paths of the deleted files
        """
        removed: list[str] = []
        for rel_path in self.find_orphans(source_files, output_files):
            try:
                removed.append(self._writer.remove(rel_path))
            except OSError as e:
                self.log.warning("orphan_remove_failed", path=rel_path, error=str(e))
                continue
            self.log.info("orphan_removed", path=rel_path)
        return removed
