"""
Probe service: turns a container on disk into a `MediaFile`.

ffprobe is run through the ffmpeg-python library (`ffmpeg.probe`), which executes
`ffprobe -show_format -show_streams -of json` and decodes its JSON output. Every way
this can go wrong is mapped onto a `ProbeException` subclass so that the batch driver
can skip the file and move on.
"""

from pathlib import Path
from pprint import pformat

import ffmpeg
from loguru import logger

from ..domain.exceptions import ProbeDecodeException, ProbeExecException
from ..domain.media import MediaFile


def probe_file(path: Path, ffprobe_binary: str = "ffprobe") -> MediaFile:
    """
    Probes a media file and parses the result.

    Args:
        path: The container to probe.
        ffprobe_binary: The ffprobe executable (name on PATH or full path).

    Returns:
        The parsed, immutable `MediaFile`.

    Raises:
        ProbeExecException: If ffprobe cannot be started or exits with an error.
        ProbeDecodeException: If ffprobe's output is not the expected JSON.
        NumberParseException: If the size or duration fields are not numbers.
        UnknownCodecTypeException: If a stream has an unsupported codec type.
    """
    try:
        probe = ffmpeg.probe(str(path), cmd=ffprobe_binary, v="error")
    except ffmpeg.Error as e:
        stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
        raise ProbeExecException(f"ffprobe failed for '{path.name}': {stderr or e}") from e
    except OSError as e:
        raise ProbeExecException(f"Could not run '{ffprobe_binary}': {e}") from e
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        raise ProbeDecodeException(f"ffprobe returned invalid JSON for '{path.name}': {e}") from e

    logger.trace(f"Probe data for {path.name}:\n{pformat(probe)}")
    return MediaFile.from_probe(probe)
