"""
Command-Line Interface (CLI) setup for MKV Cruncher.

This module uses Python's `argparse` to define and parse the command-line
arguments that control the application's behavior.
"""
import argparse
from pathlib import Path
from typing import Optional, Sequence

from .config.settings import PreloadMode, TranscodeMode

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Remove unwanted tracks from MKV files and re-encode oversized video to AV1."
    )
    parser.add_argument(
        "-i", "--input-dir", type=Path, required=True,
        help="Directory containing the MKV files to process."
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, required=True,
        help="Directory the processed files are written to."
    )
    parser.add_argument(
        "--intermediate-dir", type=Path, default=None,
        help="Write encodes here first (e.g. a fast scratch disk) and copy them to the output directory afterwards."
    )
    parser.add_argument(
        "-d", "--dry-run", action="store_true",
        help="Probe and report the stream selection without running ffmpeg."
    )
    parser.add_argument(
        "-r", "--recursive", action="store_true",
        help="Also process MKV files in subdirectories of the input directory."
    )
    parser.add_argument(
        "--transcode-video", default=TranscodeMode.AUTO.value,
        choices=[mode.value for mode in TranscodeMode],
        help="Re-encode the video stream: decided by codec, size and duration (auto), always, or never."
    )
    parser.add_argument(
        "--preload", default=PreloadMode.AUTO.value,
        choices=[mode.value for mode in PreloadMode],
        help="When to read small source files into memory and pipe them to ffmpeg."
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="YAML file overriding the default thresholds, languages and word lists."
    )
    parser.add_argument(
        "--log-level", type=str.upper, default="INFO", choices=LOG_LEVELS,
        help="Set the logging level."
    )
    parser.add_argument(
        "--log-file", type=Path, default=None,
        help="Also write the log to this file."
    )
    return parser


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses and validates command-line arguments for MKV Cruncher.

    The input directory must exist. The output and intermediate directories are
    created when they are missing and listed in `created_dirs`. The intermediate
    directory may not be the input or output directory, since a failed batch
    purges it.

    Returns:
        argparse.Namespace: An object containing the parsed command-line
                            arguments as attributes.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_dir.is_dir():
        parser.error(f"The input directory '{args.input_dir}' does not exist or is not a directory.")
    args.input_dir = args.input_dir.resolve()

    args.created_dirs = []
    for option in ("output_dir", "intermediate_dir"):
        directory: Optional[Path] = getattr(args, option)
        if directory is None:
            continue
        if not directory.is_dir():
            try:
                directory.mkdir(parents=True, exist_ok=True)
                args.created_dirs.append(directory)
            except OSError as e:
                parser.error(f"The directory '{directory}' could not be created: {e}")
        setattr(args, option, directory.resolve())

    if args.intermediate_dir is not None and args.intermediate_dir in (
        args.input_dir, args.output_dir
    ):
        parser.error(
            f"The intermediate directory '{args.intermediate_dir}' must differ from "
            "the input and output directories."
        )

    return args
