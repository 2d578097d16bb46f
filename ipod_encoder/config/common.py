"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants that are
used across the whole iPod encoder. It centralizes parameters for logging, file
naming, encoding defaults and job state tracking. It also handles the loading of
user-specific configuration from an external YAML file, allowing tool locations
and defaults to be customized without modifying the source code.
"""
from pathlib import Path
from typing import Optional, Tuple

import yaml
from loguru import logger

from ..utils.format_utils import parse_bitrate

# --- User-Defined Configuration ---
# This block loads user-specific settings from a 'config.user.yaml' file located
# at the project root. It allows users to point at specific builds of mplayer and
# ffmpeg, or to change the default video bitrate, without touching the code.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# Used when neither the command line nor the user config gives a video bitrate.
BUILTIN_VIDEO_BITRATE = "768k"


def load_user_config(config_path: Path) -> Tuple[Optional[Path], str]:
    """
    Reads `paths.tools_dir` and `encoding.vbitrate` from `config_path`.

    A missing file yields the built-in defaults. An unreadable file, or a bitrate
    that does not parse, is reported as a warning and the affected setting falls
    back to its default.
    """
    tools_path, vbitrate = None, BUILTIN_VIDEO_BITRATE
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Relying on system PATH for executables.")
        return tools_path, vbitrate

    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        paths_config = user_config.get("paths") or {}
        encoding_config = user_config.get("encoding") or {}

        tools_dir_str = paths_config.get("tools_dir")
        if tools_dir_str:
            tools_path = Path(tools_dir_str)
        if encoding_config.get("vbitrate"):
            configured = str(encoding_config["vbitrate"])
            parse_bitrate(configured)
            vbitrate = configured
    except ValueError as e:
        logger.warning(f"Ignoring `encoding.vbitrate` in '{config_path}': {e}. Using {BUILTIN_VIDEO_BITRATE}.")
    except (OSError, yaml.YAMLError, AttributeError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
    return tools_path, vbitrate


# TOOLS_PATH: the directory holding mplayer and ffmpeg, or None to use the system PATH.
# DEFAULT_VIDEO_BITRATE: the `--vbitrate` default, in the same k/m/g notation.
TOOLS_PATH, DEFAULT_VIDEO_BITRATE = load_user_config(USER_CONFIG_PATH)


# --- Logging Configuration ---

# The format string for the Loguru logger. It defines the structure and appearance
# of console messages, including timestamp, level, module name and the message.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{process} - <level>{message}</level>"
)

# Console level used when neither --verbose nor --debug is given.
DEFAULT_LOG_LEVEL = "WARNING"

# The length of the random string appended to dated success log files, so two runs
# started on the same day never write to the same file.
SUCCESS_LOG_RANDOM_LENGTH = 10


# --- Directory and File Management ---

# Subdirectory of the output directory holding the plain text error log.
ERROR_DIR_NAME = "encode_error"

# Extension of the final, device-compatible container.
OUTPUT_EXTENSION = "m4v"

# Extensions of the per-job temporaries. The conduit is a named pipe and the
# intermediate is the video-only file written by the encode stage.
CONDUIT_EXTENSION = "fifo"
INTERMEDIATE_EXTENSION = "avi"

# Permission bits of the conduit. Only the owner's processes may read or write it.
CONDUIT_MODE = 0o700


# --- Pipeline Supervision ---

# Fallback polling interval, in seconds, for the reap loop on hosts that cannot
# block on process descriptors.
REAP_POLL_INTERVAL = 0.1

# Logical names of the two pipeline stages, used in logs and failure reports.
DECODE_STAGE = "decode"
ENCODE_STAGE = "encode"


# --- Job State Constants ---
# A job moves through these states in order. `done` and `failed` are terminal.

JOB_STATE_CREATED = "created"  # Job built, nothing on disk yet.
JOB_STATE_RESOURCES_OPENED = "resources_opened"  # Tracked scope open, conduit created.
JOB_STATE_STAGES_RUNNING = "stages_running"  # Both stage processes launched.
JOB_STATE_STAGES_TERMINATED = "stages_terminated"  # Both stages reaped.
JOB_STATE_MULTIPLEX_RUNNING = "multiplex_running"  # Final combine in progress.
JOB_STATE_DONE = "done"  # Destination written, intermediate removed.
JOB_STATE_FAILED = "failed"  # No destination was produced.
