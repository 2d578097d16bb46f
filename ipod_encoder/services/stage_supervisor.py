"""
This module defines the StageSupervisor, the small capability interface through
which the pipeline drives one external stage process: launch, poll, wait and
terminate. Nothing here knows what the process does; only its exit contract is
observed.
"""

import signal
import subprocess
from typing import Optional, Sequence

from loguru import logger

from ..domain.exceptions import LaunchError
from ..domain.process import ExitStatus, StageHandle
from ..utils.ffmpeg_utils import display_cmd


class StageSupervisor:
    """
    Launches and supervises stage processes.

    Stages inherit the orchestrator's stdout and stderr so the tools' progress
    output stays visible. Their stdin is closed, since mplayer would otherwise
    compete with the terminal for keyboard input.
    """

    def launch(self, name: str, argv: Sequence[str]) -> StageHandle:
        """
        Starts `argv` as the process of stage `name`.

        Raises:
            LaunchError: If the executable cannot be found or started.
        """
        cmd_list = [str(part) for part in argv]
        if not cmd_list:
            raise LaunchError(name, cmd_list, "empty command")

        logger.info(f"Executing {display_cmd(cmd_list)}")
        try:
            process = subprocess.Popen(cmd_list, stdin=subprocess.DEVNULL)
        except FileNotFoundError as e:
            raise LaunchError(name, cmd_list, "executable not found") from e
        except OSError as e:
            raise LaunchError(name, cmd_list, str(e)) from e

        logger.debug(f"{name} stage started with pid {process.pid}")
        return StageHandle(name=name, argv=cmd_list, process=process)

    def poll(self, handle: StageHandle) -> Optional[ExitStatus]:
        """Returns the stage's status if it has exited, without blocking."""
        if handle.status is None:
            returncode = handle.process.poll()
            if returncode is not None:
                handle.status = ExitStatus(returncode)
        return handle.status

    def wait(self, handle: StageHandle) -> ExitStatus:
        """Blocks until the stage exits and returns its status."""
        if handle.status is None:
            handle.status = ExitStatus(handle.process.wait())
        return handle.status

    def terminate(self, handle: StageHandle, grace_signal: int = signal.SIGTERM):
        """
        Asks a running stage to terminate by sending `grace_signal`.

        Calling this on a stage that has already exited (reaped or not) is a no-op.
        The caller still has to reap the process with `wait` or `poll`.
        """
        if handle.status is not None:
            return
        try:
            handle.process.send_signal(grace_signal)
            logger.info(f"Sent {signal.Signals(grace_signal).name} to {handle.name} stage (pid {handle.pid})")
        except ProcessLookupError:
            logger.debug(f"{handle.name} stage (pid {handle.pid}) already exited; nothing to terminate.")
