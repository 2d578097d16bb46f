"""
This module creates the named pipe that joins the decode and encode stages.

mplayer writes raw yuv4mpeg frames into the conduit while ffmpeg reads them, so
the uncompressed stream never touches the disk or the orchestrator's memory. The
pipe is a bounded kernel buffer: the writer blocks while the reader lags behind,
and the reader blocks until data arrives or the writer closes its end.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from loguru import logger

from ..config.common import CONDUIT_MODE
from ..domain.exceptions import ResourceCreationError


@dataclass(frozen=True)
class ConduitHandle:
    """A created conduit. There is no close operation; unlinking the path is enough."""

    path: Path

    def __str__(self) -> str:
        return str(self.path)


def create_conduit(path: Union[str, Path], mode: int = CONDUIT_MODE) -> ConduitHandle:
    """
    Creates a named pipe at `path`.

    Args:
        path: Where to create the conduit. Nothing may exist there yet.
        mode: Permission bits of the new pipe.

    Returns:
        A `ConduitHandle` for the new pipe.

    Raises:
        ResourceCreationError: If a filesystem object already exists at `path`, if
                               the host has no named pipe support, or if the pipe
                               cannot be created for any other reason.
    """
    conduit_path = Path(path)
    if conduit_path.exists() or conduit_path.is_symlink():
        raise ResourceCreationError(f"Cannot create conduit: '{conduit_path}' already exists.")

    mkfifo = getattr(os, "mkfifo", None)
    if mkfifo is None:
        raise ResourceCreationError("Cannot create conduit: named pipes are not supported on this host.")

    try:
        mkfifo(conduit_path, mode)
    except FileExistsError as e:
        raise ResourceCreationError(f"Cannot create conduit: '{conduit_path}' already exists.") from e
    except OSError as e:
        raise ResourceCreationError(f"Cannot create conduit '{conduit_path}': {e}") from e

    logger.debug(f"Created conduit {conduit_path}")
    return ConduitHandle(conduit_path)
