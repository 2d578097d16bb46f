"""
Defines the scoped tracker for temporary filesystem resources of a job.
"""

from pathlib import Path
from typing import Callable, List, TypeVar, Union

from loguru import logger

T = TypeVar("T")


class TransientResources:
    """
    Records paths created during a unit of work and deletes them on scope exit.

    Every job of the pipeline owns exactly one tracker. The conduit is appended
    right after it is created and the intermediate right before the encode stage
    is launched, so whatever happens afterwards (a stage failure, a multiplex
    error, an interrupt) both paths are gone once the scope closes.

    Lifecycle:
    1. Enter the scope (`with TransientResources() as tracked:` or `open(body)`).
    2. Append each path as soon as it may exist on disk.
    3. On exit, every tracked path is unlinked if present. Paths removed earlier by
       someone else (e.g. the multiplex step deleting the intermediate) are skipped.

    Deletion errors are logged and ignored, and never replace the exception that
    is unwinding the scope.

    Attributes:
        paths (List[Path]): The tracked paths, in the order they were added.
    """

    def __init__(self):
        self.paths: List[Path] = []

    def append(self, path: Union[str, Path]) -> Path:
        tracked_path = Path(path)
        self.paths.append(tracked_path)
        logger.trace(f"Tracking transient resource: {tracked_path}")
        return tracked_path

    def open(self, body: Callable[["TransientResources"], T]) -> T:
        """
        Runs `body` inside a tracked scope and returns its result.

        Args:
            body: A callable receiving this tracker. Paths it appends are removed
                  when it returns or raises.
        """
        with self:
            return body(self)

    def cleanup(self):
        """Deletes every tracked path that still exists. Safe to call repeatedly."""
        for path in self.paths:
            try:
                path.unlink(missing_ok=True)
                logger.debug(f"Removed transient resource (if present): {path}")
            except OSError as e:
                logger.debug(f"Could not remove transient resource {path}: {e}")

    def __enter__(self) -> "TransientResources":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
        return False

    def __len__(self) -> int:
        return len(self.paths)
