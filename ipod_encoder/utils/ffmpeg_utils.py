"""
This module provides utility functions for running the external tools.

It includes a wrapper for running a blocking command-line process with logging,
and a helper to render an argument vector the way it would be typed in a shell.
"""

import os
import shlex
import subprocess
from typing import List, Optional, Sequence

from loguru import logger


def display_cmd(cmd_list: Sequence[str]) -> str:
    """Returns a shell-quoted, display-friendly rendering of `cmd_list`."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(cmd_list))
    return shlex.join(str(part) for part in cmd_list)


def run_cmd(
    cmd_list: List[str],
    show_cmd: bool = False,
) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command to completion and captures its output.

    This is a wrapper around Python's `subprocess.run` that adds logging. The
    command is always run without a shell.

    Args:
        cmd_list: The command to execute as a list of arguments.
        show_cmd: If True, the command is logged at INFO level before execution,
                  otherwise at DEBUG level.

    Returns:
        A `subprocess.CompletedProcess` object containing the return code, stdout
        and stderr. Returns `None` if the command could not be started (e.g. the
        executable was not found).
    """
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = display_cmd(cmd_list)
    if show_cmd:
        logger.info(f"Executing {display_cmd_str}")
    else:
        logger.debug(f"Executing {display_cmd_str}")

    try:
        result = subprocess.run(
            [str(part) for part in cmd_list],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            stdin=subprocess.DEVNULL,
            shell=False,
        )
    except FileNotFoundError:
        logger.error(
            f"Error: Command not found ('{cmd_list[0]}'). Ensure it's in your system's PATH or configured correctly."
        )
        return None
    except OSError as e:
        logger.error(f"Could not execute '{cmd_list[0]}': {e}")
        return None

    if result.stdout:
        logger.trace(f"Command stdout: {result.stdout[-500:]}")
    # Distinguish between error output and informational output on stderr.
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr[-2000:]}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr[-500:]}")

    return result
