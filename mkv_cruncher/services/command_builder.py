"""
This module turns the selection decisions for one file into an ffmpeg invocation.

`build_encode_command` is a pure function of its inputs. The only I/O it can trigger
is reading the source file into memory when the file is small enough to be piped to
ffmpeg's stdin, and even that goes through the injectable `loader` argument.
"""

from pathlib import Path
from typing import Callable, List, Optional

from ..config.settings import PreloadMode, Settings
from ..domain.command import EncodeCommand, InlineInput, InputMode, PathInput
from ..domain.media import MediaFile
from ..domain.selection import SelectedStream, SelectionResult
from ..utils.format_utils import format_size
from .reporting_service import Reporter

# Quiet ffmpeg, print progress records to stdout and always overwrite the output.
BASE_ARGUMENTS = ["-hide_banner", "-loglevel", "error", "-progress", "pipe:1", "-y"]

STDIN_INPUT = "pipe:0"


def _wants_preload(media_file: MediaFile, transcode_video: bool, settings: Settings) -> bool:
    if settings.preload_mode == PreloadMode.NEVER:
        return False
    if settings.preload_mode == PreloadMode.TRANSCODE_ONLY and not transcode_video:
        return False
    return media_file.size < settings.preload_threshold


def _choose_input(
    source_path: Path,
    media_file: MediaFile,
    transcode_video: bool,
    settings: Settings,
    loader: Callable[[Path], bytes],
    reporter: Optional[Reporter],
) -> InputMode:
    if not _wants_preload(media_file, transcode_video, settings):
        if reporter is not None:
            reporter.note(f"Reading {format_size(media_file.size)} from disk.")
        return PathInput(source_path)

    if reporter is not None:
        reporter.note(f"Loading {format_size(media_file.size)} into memory.")
    try:
        return InlineInput(loader(source_path))
    except OSError as e:
        if reporter is not None:
            reporter.note(f"Failed to load file into memory ({e}), reading from disk.")
        return PathInput(source_path)


def _map_category(specifier: str, selection: SelectionResult) -> List[str]:
    """
    Maps a whole category with one `-map 0:<specifier>` when every track was kept,
    otherwise one `-map 0:<specifier>:<index>` per kept track.

    An empty selection produces no arguments: ffmpeg rejects a bulk map that
    matches no stream.
    """
    if selection.kept_all():
        return ["-map", f"0:{specifier}"]
    arguments: List[str] = []
    for selected in selection:
        arguments += ["-map", f"0:{specifier}:{selected.index}"]
    return arguments


def _audio_output_order(audio: SelectionResult) -> List[SelectedStream]:
    """The kept audio tracks in the order they appear in the output file."""
    if audio.kept_all():
        return sorted(audio.kept, key=lambda selected: selected.index)
    return list(audio.kept)


def _audio_codec_arguments(audio: SelectionResult, settings: Settings) -> List[str]:
    arguments: List[str] = []
    lossless = {codec.lower() for codec in settings.lossless_audio_codecs}
    for position, selected in enumerate(_audio_output_order(audio)):
        if selected.stream.codec_name.lower() in lossless:
            arguments += [
                f"-c:a:{position}", settings.lossless_target_encoder,
                f"-ac:a:{position}", str(settings.lossless_target_channels),
            ]
        else:
            arguments += [f"-c:a:{position}", "copy"]
    return arguments


def _video_codec_arguments(transcode_video: bool, settings: Settings) -> List[str]:
    if not transcode_video:
        return ["-c:v", "copy"]
    return [
        "-c:v", settings.video_encoder,
        "-crf", str(settings.video_crf),
        "-preset", str(settings.video_preset),
        "-g", str(settings.video_gop_size),
        "-pix_fmt", settings.video_pixel_format,
    ]


def build_encode_command(
    source_path: Path,
    media_file: MediaFile,
    transcode_video: bool,
    subtitles: SelectionResult,
    audio: SelectionResult,
    attachments: SelectionResult,
    settings: Settings,
    loader: Callable[[Path], bytes] = Path.read_bytes,
    reporter: Optional[Reporter] = None,
) -> EncodeCommand:
    """
    Builds the ffmpeg arguments and input mode for one file.

    Args:
        source_path: The container being crunched.
        media_file: Its probe result.
        transcode_video: The video decision from the stream selector.
        subtitles: Kept subtitle tracks.
        audio: Kept audio tracks.
        attachments: Kept attachments.
        settings: The run settings (encoder parameters, thresholds, directories).
        loader: Reads the whole source file when it is piped to ffmpeg.
        reporter: Receives notes about how the input is delivered.

    Returns:
        The `EncodeCommand`; its output path is inside the intermediate directory
        when one is configured, otherwise inside the output directory.
    """
    input_mode = _choose_input(
        source_path, media_file, transcode_video, settings, loader, reporter
    )
    input_argument = STDIN_INPUT if isinstance(input_mode, InlineInput) else str(source_path)
    output_path = settings.staging_dir / source_path.name

    arguments = list(BASE_ARGUMENTS)
    arguments += ["-i", input_argument]

    # Only the first video stream; skips cover pictures stored as video.
    arguments += ["-map", "0:v:0"]
    arguments += _map_category("s", subtitles)
    arguments += _map_category("a", audio)
    arguments += _map_category("t", attachments)

    arguments += _video_codec_arguments(transcode_video, settings)
    arguments += _audio_codec_arguments(audio, settings)
    arguments += ["-c:s", "copy"]

    # Strip titles from the container, video and audio tracks.
    arguments += ["-metadata", "title="]
    arguments += ["-metadata:s:v", "title="]
    arguments += ["-metadata:s:a", "title="]
    # Video tracks should never carry a language; some sources tag them anyway.
    arguments += ["-metadata:s:v", "language=und"]

    arguments.append(str(output_path))

    return EncodeCommand(arguments=arguments, input_mode=input_mode, output_path=output_path)
