"""Tests for the ffprobe adapter."""

from pathlib import Path

import ffmpeg
import pytest

from mkv_cruncher.domain.exceptions import (
    ProbeDecodeException,
    ProbeExecException,
    UnknownCodecTypeException,
)
from mkv_cruncher.services import probe_service
from mkv_cruncher.services.probe_service import probe_file


class TestProbeFile:
    """Tests for probe_file."""

    def test_returns_parsed_media_file(self, monkeypatch, build) -> None:
        """The JSON returned by ffmpeg.probe is parsed into a MediaFile."""
        calls = []

        def fake_probe(filename, cmd="ffprobe", **kwargs):
            calls.append((filename, cmd, kwargs))
            return build.probe([build.probe_stream("video", "h264")], size="2048")

        monkeypatch.setattr(probe_service.ffmpeg, "probe", fake_probe)

        media = probe_file(Path("/library/show.mkv"), ffprobe_binary="/opt/ffmpeg/ffprobe")

        assert media.size == 2048
        assert media.video_streams()[0].codec_name == "h264"
        assert calls == [("/library/show.mkv", "/opt/ffmpeg/ffprobe", {"v": "error"})]

    def test_ffprobe_error_maps_to_exec_exception(self, monkeypatch) -> None:
        """A failing ffprobe becomes ProbeExecException carrying its stderr."""

        def fake_probe(filename, cmd="ffprobe", **kwargs):
            raise ffmpeg.Error("ffprobe", b"", b"Invalid data found when processing input")

        monkeypatch.setattr(probe_service.ffmpeg, "probe", fake_probe)

        with pytest.raises(ProbeExecException, match="Invalid data found"):
            probe_file(Path("broken.mkv"))

    def test_missing_binary_maps_to_exec_exception(self, monkeypatch) -> None:
        """An ffprobe that cannot be started becomes ProbeExecException."""

        def fake_probe(filename, cmd="ffprobe", **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd)

        monkeypatch.setattr(probe_service.ffmpeg, "probe", fake_probe)

        with pytest.raises(ProbeExecException):
            probe_file(Path("show.mkv"), ffprobe_binary="missing-ffprobe")

    def test_invalid_json_maps_to_decode_exception(self, monkeypatch) -> None:
        """Garbage output becomes ProbeDecodeException."""

        def fake_probe(filename, cmd="ffprobe", **kwargs):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

        monkeypatch.setattr(probe_service.ffmpeg, "probe", fake_probe)

        with pytest.raises(ProbeDecodeException):
            probe_file(Path("show.mkv"))

    def test_parse_errors_propagate(self, monkeypatch, build) -> None:
        """Model errors are raised as their own ProbeException subclass."""
        monkeypatch.setattr(
            probe_service.ffmpeg,
            "probe",
            lambda filename, cmd="ffprobe", **kwargs: build.probe(
                [build.probe_stream("data", "")]
            ),
        )

        with pytest.raises(UnknownCodecTypeException):
            probe_file(Path("show.mkv"))
