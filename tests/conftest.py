"""Shared test fixtures for MKV Cruncher."""

from datetime import timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest

from mkv_cruncher.config.settings import Settings
from mkv_cruncher.domain.media import (
    AttachmentKind,
    AudioKind,
    MediaFile,
    Stream,
    SubtitleKind,
    VideoKind,
)
from mkv_cruncher.services.reporting_service import Reporter

MIB = 1024 * 1024
GIB = 1024 * MIB


def video_stream(codec: str = "hevc", language: str = "und", title: str = "") -> Stream:
    return Stream(codec, VideoKind(language=language, title=title))


def audio_stream(
    codec: str = "aac", language: str = "jpn", title: str = "", channels: int = 2
) -> Stream:
    return Stream(codec, AudioKind(language=language, title=title, channels=channels))


def subtitle_stream(codec: str = "ass", language: str = "eng", title: str = "") -> Stream:
    return Stream(codec, SubtitleKind(language=language, title=title))


def attachment_stream(filename: str = "font.ttf", mime_type: str = "font/ttf") -> Stream:
    return Stream("ttf", AttachmentKind(filename=filename, mime_type=mime_type))


def media_file(*streams: Stream, size: int = 400 * MIB, duration: float = 1440.0) -> MediaFile:
    return MediaFile(size=size, duration=duration, streams=tuple(streams))


def probe_stream(codec_type: str, codec_name: str = "", **tags) -> dict:
    """One entry of ffprobe's `streams` list."""
    entry = {"codec_type": codec_type, "codec_name": codec_name}
    channels = tags.pop("channels", None)
    if channels is not None:
        entry["channels"] = channels
    if tags:
        entry["tags"] = tags
    return entry


def probe_dict(streams, size: str = "419430400", duration: str = "1440.000000") -> dict:
    """A minimal `ffprobe -show_format -show_streams` result."""
    return {"format": {"size": size, "duration": duration}, "streams": list(streams)}


@pytest.fixture
def build():
    """Builders for streams, media files and raw probe dictionaries."""
    return SimpleNamespace(
        video=video_stream,
        audio=audio_stream,
        subtitle=subtitle_stream,
        attachment=attachment_stream,
        media=media_file,
        probe_stream=probe_stream,
        probe=probe_dict,
    )


@pytest.fixture
def dirs(tmp_path: Path) -> SimpleNamespace:
    """Input, output and intermediate directories inside tmp_path."""
    paths = SimpleNamespace(
        input=tmp_path / "input",
        output=tmp_path / "output",
        intermediate=tmp_path / "intermediate",
    )
    for directory in vars(paths).values():
        directory.mkdir()
    return paths


@pytest.fixture
def settings(dirs: SimpleNamespace) -> Settings:
    """Default settings writing directly to the output directory."""
    return Settings(input_dir=dirs.input, output_dir=dirs.output)


@pytest.fixture
def staged_settings(dirs: SimpleNamespace) -> Settings:
    """Default settings with an intermediate directory."""
    return Settings(
        input_dir=dirs.input, output_dir=dirs.output, intermediate_dir=dirs.intermediate
    )


class RecordingReporter(Reporter):
    """Collects every reported event as a tuple, in order."""

    def __init__(self):
        self.events = []

    def file_started(self, file_name, position, total):
        self.events.append(("file_started", file_name, position, total))

    def selection_summary(self, category, selection):
        self.events.append(("selection", category, tuple(selection.indices()), selection.total))

    def video_decision(self, transcode, reason):
        self.events.append(("video", transcode, reason))

    def note(self, message):
        self.events.append(("note", message))

    def encode_started(self, file_name, duration_seconds):
        self.events.append(("encode_started", file_name, duration_seconds))

    def progress(self, key, value):
        self.events.append(("progress", key, value))

    def encode_finished(self, succeeded):
        self.events.append(("encode_finished", succeeded))

    def file_finished(self, file_name, elapsed: timedelta):
        self.events.append(("file_finished", file_name))

    def of(self, name):
        return [event for event in self.events if event[0] == name]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
