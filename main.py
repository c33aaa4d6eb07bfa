"""
Main entry point for MKV Cruncher.

This script parses command-line arguments, configures logging, builds the run
settings from the defaults, the user config and the arguments, and launches the
batch pipeline.
"""

import sys

from loguru import logger

from mkv_cruncher.cli import get_args
from mkv_cruncher.config.common import LOGGER_FILE_FORMAT, LOGGER_FORMAT, load_user_config
from mkv_cruncher.config.settings import build_settings
from mkv_cruncher.domain.exceptions import ConfigurationException
from mkv_cruncher.pipeline.crunch_pipeline import CrunchPipeline
from mkv_cruncher.services.reporting_service import LoguruReporter


def configure_logging(level: str, log_file=None) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)
    if log_file is not None:
        logger.add(log_file, level=level, format=LOGGER_FILE_FORMAT, encoding="utf-8")


def main():
    """
    Main function to start the batch.

    Exits with status 1 when the configuration is invalid or the batch was stopped
    by an encode or finalize failure.
    """
    args = get_args()
    configure_logging(args.log_level, args.log_file)
    for directory in args.created_dirs:
        logger.info(f"Created directory: {directory}")
    logger.debug(f"Parsed arguments: {args}")

    try:
        settings = build_settings(args, load_user_config(args.config))
    except ConfigurationException as e:
        logger.error(e)
        sys.exit(1)

    if settings.dry_run:
        logger.info("Dry run: no files will be written.")

    pipeline = CrunchPipeline(settings, reporter=LoguruReporter())
    result = pipeline.run()

    if not result.succeeded:
        sys.exit(1)
    logger.success(
        f"MKV Cruncher finished: {len(result.processed)} processed, {len(result.skipped)} skipped."
    )


if __name__ == "__main__":
    main()
