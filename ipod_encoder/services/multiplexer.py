"""
This module defines the MultiplexStep, the last step of a successful job.

The encode stage produces a video-only intermediate. This step copies that video
track unchanged next to the source's audio track (re-encoded for the device) in
the destination container, and embeds the job's title as metadata.
"""

from pathlib import Path

from loguru import logger

from ..domain.exceptions import MultiplexError
from ..utils.ffmpeg_utils import run_cmd
from .transcode_profile import TranscodeProfile


class MultiplexStep:
    """
    Combines source audio and encoded video into the final artifact.

    Must only be run once both pipeline stages have succeeded.
    """

    def __init__(self, profile: TranscodeProfile):
        self.profile = profile

    def run(self, source: Path, intermediate: Path, destination: Path, title: str):
        """
        Writes `destination` and, on success, deletes `intermediate` right away.

        Raises:
            MultiplexError: If the tool cannot be run or exits with a nonzero status.
                            A partly written destination is removed; the
                            intermediate is left for the job's cleanup scope.
        """
        cmd_list = self.profile.multiplex_cmd(source, intermediate, destination, title)
        res = run_cmd(cmd_list, show_cmd=True)

        if res is None:
            raise MultiplexError(f"Multiplex of '{destination.name}' failed: could not run '{cmd_list[0]}'")
        if res.returncode != 0:
            # The tool truncates the destination before writing it.
            destination.unlink(missing_ok=True)
            stderr_tail = "\n".join((res.stderr or "").strip().splitlines()[-5:])
            raise MultiplexError(
                f"Multiplex of '{destination.name}' failed with status {res.returncode}"
                + (f":\n{stderr_tail}" if stderr_tail else ""),
                returncode=res.returncode,
            )

        intermediate.unlink(missing_ok=True)
        logger.debug(f"Multiplex complete; removed intermediate {intermediate}")
