"""
Main entry point for the iPod encoder.

This script parses command-line arguments, configures logging, checks for the
external tools and runs the batch of encodes. Its exit status is 0 when every
file was encoded, 1 when any encode failed and 2 for usage errors.
"""

import sys
from typing import Optional, Sequence

from loguru import logger

from ipod_encoder.cli import get_args
from ipod_encoder.config.common import DEFAULT_LOG_LEVEL, LOGGER_FORMAT
from ipod_encoder.domain.exceptions import IPodEncoderException
from ipod_encoder.pipeline.batch_pipeline import BatchPipeline
from ipod_encoder.utils.module_updater import Modules


def configure_logger(debug: bool = False, verbose: bool = False) -> str:
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = DEFAULT_LOG_LEVEL
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT, backtrace=debug, diagnose=debug)
    return level


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Runs the encoder and returns the process exit status.

    1. Parses command-line arguments.
    2. Configures the global logger from --verbose / --debug.
    3. Verifies mplayer and ffmpeg can be executed.
    4. Builds every job's title, then encodes the jobs one after another.
    """
    args = get_args(argv)
    configure_logger(debug=args.debug, verbose=args.verbose)
    logger.debug(f"Parsed arguments: {args}")

    if not Modules.run_all():
        logger.warning("Tool checks failed; encoding will most likely fail.")

    try:
        pipeline = BatchPipeline.from_args(args)
        result = pipeline.run()
    except (IPodEncoderException, ValueError) as e:
        logger.error(str(e))
        return 1

    if not result.ok:
        return 1
    logger.success("iPod encoder finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
