"""
Command-Line Interface (CLI) setup for the iPod encoder.

This module uses Python's `argparse` to define and parse the command-line
arguments that control the application's behavior.
"""
import argparse
from pathlib import Path
from typing import Optional, Sequence

from .config.common import DEFAULT_VIDEO_BITRATE
from .services.title_service import DEFAULT_NUMBER_PATTERN
from .utils.format_utils import parse_bitrate


def _bitrate(text: str) -> str:
    try:
        parse_bitrate(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return text


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the iPod encoder.

    Args:
        argv: The arguments to parse. Defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: An object containing the parsed command-line
                            arguments as attributes.
    """
    parser = argparse.ArgumentParser(
        description="A video converter for the iPod, built on top of mplayer and ffmpeg.",
        epilog="Example: ipod-encode --title='A Title' video-01.avi video-02.avi",
    )
    parser.add_argument(
        "inputs", nargs="+", type=Path, help="Source video files, encoded one after another."
    )
    parser.add_argument(
        "--title", required=True,
        help="Title of the encoded video, used for the output filename and the title metadata.",
    )
    parser.add_argument(
        "--standalone", action="store_true",
        help="Use the title as is instead of appending the episode number. Only valid with a single input.",
    )
    parser.add_argument(
        "--number-pattern", default=None,
        help=f"Regex with one capture group extracting the episode number from each filename "
             f"(default: {DEFAULT_NUMBER_PATTERN}).",
    )
    parser.add_argument(
        "--sequential-numbers", action="store_true",
        help="Number the inputs 1..n in argument order instead of extracting numbers from filenames.",
    )
    parser.add_argument(
        "--vbitrate", type=_bitrate, default=DEFAULT_VIDEO_BITRATE,
        help=f"Video bitrate, with an optional k/m/g suffix (default: {DEFAULT_VIDEO_BITRATE}).",
    )
    parser.add_argument(
        "--overwrite", action="store_true",
        help="Overwrite an existing output file instead of picking a unique name.",
    )
    parser.add_argument(
        "--output-dir", type=Path, default=None,
        help="Directory for the encoded files (default: current directory).",
    )
    parser.add_argument(
        "--temp-work-dir", type=Path, default=None,
        help="Directory for the pipe and the intermediate video (default: current directory).",
    )
    parser.add_argument(
        "--fail-fast", action="store_true",
        help="Stop at the first failed encode instead of continuing with the remaining files.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Switch on chatty logging."
    )
    parser.add_argument(
        "--debug", action="store_true", help="Switch on fine tracing of execution."
    )

    args = parser.parse_args(argv)

    if args.standalone and len(args.inputs) > 1:
        parser.error("--standalone cannot be used with multiple input files.")
    if args.standalone and (args.number_pattern or args.sequential_numbers):
        parser.error("--standalone cannot be combined with --number-pattern or --sequential-numbers.")
    if args.number_pattern and args.sequential_numbers:
        parser.error("--number-pattern and --sequential-numbers are mutually exclusive.")

    missing = [str(p) for p in args.inputs if not p.is_file()]
    if missing:
        parser.error(f"Input file(s) not found: {', '.join(missing)}")

    # Validate the directories if provided. If they don't exist, try to create them.
    for attr in ("output_dir", "temp_work_dir"):
        dir_path = getattr(args, attr)
        if dir_path is None:
            continue
        if not dir_path.is_dir():
            try:
                dir_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                parser.error(f"The directory '{dir_path}' does not exist and could not be created: {e}")
        setattr(args, attr, dir_path.resolve())

    return args
