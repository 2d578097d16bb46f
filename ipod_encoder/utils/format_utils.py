"""
This module contains helper functions for parsing and formatting values.

They cover the small string and filesystem chores of the encoder: turning a
bitrate like "768k" into bits per second, picking a filename that does not
collide with an existing one, and presenting durations and sizes in log entries.
"""

import re
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

# Binary multiples, so "768k" is 768 * 1024 bits per second.
_BITRATE_MULTIPLIERS = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}
_BITRATE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmg]?)\s*$", re.IGNORECASE)


def parse_bitrate(text: Union[str, int]) -> int:
    """
    Parses a bitrate with an optional k/m/g magnitude suffix into bits per second.

    Examples:
        "768k" -> 786432, "1m" -> 1048576, "500000" -> 500000, "1.5m" -> 1572864

    Raises:
        ValueError: If the text is not a non-negative number with an optional suffix.
    """
    if isinstance(text, int):
        return text
    match = _BITRATE_PATTERN.match(str(text))
    if not match:
        raise ValueError(f"Invalid bitrate: '{text}' (expected e.g. 768k, 1m or 500000)")
    number, suffix = match.groups()
    return int(float(number) * _BITRATE_MULTIPLIERS[suffix.lower()])


def unique_filename_for(base: str, extension: str, directory: Optional[Path] = None) -> Path:
    """
    Returns `<base>.<extension>` or, if that exists, the first free `<base>-N.<extension>`.

    Existence is checked with `lexists`, so dangling symlinks and named pipes left
    behind by a crashed run count as taken.

    Args:
        base: The file name without extension.
        extension: The extension, without the leading dot.
        directory: The directory to probe. Defaults to the current working directory.
    """
    directory = directory if directory is not None else Path.cwd()
    candidate = directory / f"{base}.{extension}"
    tries = 1
    while _lexists(candidate):
        candidate = directory / f"{base}-{tries}.{extension}"
        tries += 1
    return candidate


def _lexists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def format_timedelta(td_object: timedelta) -> str:
    """
    Formats a timedelta object into a "HH:MM:SS" string.

    Returns "00:00:00" if the input is not a valid timedelta object.
    """
    if not isinstance(td_object, timedelta):
        return "00:00:00"

    total_seconds = int(td_object.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def formatted_size(size_bytes: int) -> str:
    """
    Converts a size in bytes to a human-readable string (e.g., B, KB, MB, GB, TB).

    For example, 1536 becomes "1.50 KB", and 2097152 becomes "2 MB".
    """
    if size_bytes < 0:
        size_bytes = 0

    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    factor = 1024.0

    if size_bytes == 0:
        return "0 B"

    for unit in units:
        if size_bytes < factor:
            if unit == "B":
                return f"{size_bytes} {unit}"
            # Clean up ".00" for whole numbers (e.g., "2.00 MB" -> "2 MB").
            return f"{size_bytes:.2f} {unit}".replace(".00", "")
        size_bytes /= factor

    return f"{size_bytes:.2f} {units[-1]}".replace(".00", "")
