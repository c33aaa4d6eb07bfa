"""
In-memory model of a probed Matroska container.

A `MediaFile` is built once from the ffprobe JSON of a file and is immutable
afterwards. Every stream carries exactly one `kind`, chosen at parse time from the
probe's `codec_type`, so the rest of the application never has to look at raw
probe dictionaries.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from .exceptions import NumberParseException, ProbeDecodeException, UnknownCodecTypeException

UNDEFINED_LANGUAGE = "und"


@dataclass(frozen=True)
class AudioKind:
    language: str
    title: str
    channels: int


@dataclass(frozen=True)
class VideoKind:
    language: str
    title: str


@dataclass(frozen=True)
class SubtitleKind:
    language: str
    title: str


@dataclass(frozen=True)
class AttachmentKind:
    filename: str
    mime_type: str


StreamKind = Union[AudioKind, VideoKind, SubtitleKind, AttachmentKind]


@dataclass(frozen=True)
class Stream:
    """
    One track inside a container.

    Attributes:
        codec_name: The codec name reported by ffprobe (e.g. 'hevc', 'ass', 'flac').
                    Attachments usually report 'ttf' or an empty string.
        kind: The kind-specific fields, one of `AudioKind`, `VideoKind`,
              `SubtitleKind` or `AttachmentKind`.
    """

    codec_name: str
    kind: StreamKind

    @classmethod
    def from_probe(cls, stream_data: Dict[str, Any]) -> "Stream":
        """
        Builds a Stream from one entry of ffprobe's `streams` list.

        Raises:
            UnknownCodecTypeException: If `codec_type` is not one of the four supported kinds.
            ProbeDecodeException: If the entry is not a mapping or has malformed tags.
        """
        if not isinstance(stream_data, dict):
            raise ProbeDecodeException(f"Stream entry is not an object: {stream_data!r}")

        tags = stream_data.get("tags") or {}
        if not isinstance(tags, dict):
            raise ProbeDecodeException(f"Stream tags are not an object: {tags!r}")

        title = tags.get("title") or ""
        language = tags.get("language") or UNDEFINED_LANGUAGE
        codec_type = stream_data.get("codec_type")

        if codec_type == "audio":
            try:
                channels = int(stream_data.get("channels") or 0)
            except (TypeError, ValueError) as e:
                raise NumberParseException("channels", stream_data.get("channels")) from e
            kind: StreamKind = AudioKind(language=language, title=title, channels=channels)
        elif codec_type == "video":
            kind = VideoKind(language=language, title=title)
        elif codec_type == "subtitle":
            kind = SubtitleKind(language=language, title=title)
        elif codec_type == "attachment":
            kind = AttachmentKind(
                filename=tags.get("filename") or "",
                mime_type=tags.get("mimetype") or "",
            )
        else:
            raise UnknownCodecTypeException(codec_type)

        return cls(codec_name=stream_data.get("codec_name") or "", kind=kind)

    @property
    def is_audio(self) -> bool:
        return isinstance(self.kind, AudioKind)

    @property
    def is_video(self) -> bool:
        return isinstance(self.kind, VideoKind)

    @property
    def is_subtitle(self) -> bool:
        return isinstance(self.kind, SubtitleKind)

    @property
    def is_attachment(self) -> bool:
        return isinstance(self.kind, AttachmentKind)

    def title_or_default(self) -> str:
        """The stream title; the filename for attachments. Empty when untagged."""
        if isinstance(self.kind, AttachmentKind):
            return self.kind.filename
        return self.kind.title

    def language_or_default(self) -> str:
        """The language tag ('und' when untagged); always empty for attachments."""
        if isinstance(self.kind, AttachmentKind):
            return ""
        return self.kind.language or UNDEFINED_LANGUAGE

    # Aliases matching the naming used in log output and reports.
    display_title = title_or_default
    display_language = language_or_default

    def channels(self) -> int:
        """The channel count of an audio stream, 0 for anything else or when unknown."""
        if isinstance(self.kind, AudioKind):
            return self.kind.channels
        return 0


@dataclass(frozen=True)
class MediaFile:
    """
    Represents one probed container and provides typed access to its streams.

    Attributes:
        size: The container size in bytes, as reported by ffprobe's `format.size`.
        duration: The container duration in seconds (`format.duration`).
        streams: All streams in the order ffprobe reported them.
    """

    size: int
    duration: float
    streams: Tuple[Stream, ...]

    @classmethod
    def from_probe(cls, probe: Dict[str, Any]) -> "MediaFile":
        """
        Parses the JSON structure returned by `ffprobe -show_format -show_streams`.

        `format.size` and `format.duration` arrive as numeric strings and are parsed
        as an unsigned integer and a float respectively.

        Raises:
            ProbeDecodeException: If `format` or `streams` is missing or malformed.
            NumberParseException: If size or duration is not a valid number.
            UnknownCodecTypeException: If any stream has an unsupported codec type.
        """
        if not isinstance(probe, dict):
            raise ProbeDecodeException(f"Probe result is not an object: {type(probe).__name__}")
        format_info = probe.get("format")
        stream_list = probe.get("streams")
        if not isinstance(format_info, dict):
            raise ProbeDecodeException("Probe result has no 'format' section.")
        if not isinstance(stream_list, list):
            raise ProbeDecodeException("Probe result has no 'streams' list.")

        size = _parse_size(format_info.get("size"))
        duration = _parse_duration(format_info.get("duration"))
        streams = tuple(Stream.from_probe(s) for s in stream_list)
        return cls(size=size, duration=duration, streams=streams)

    def video_streams(self) -> Tuple[Stream, ...]:
        return tuple(s for s in self.streams if s.is_video)

    def audio_streams(self) -> Tuple[Stream, ...]:
        return tuple(s for s in self.streams if s.is_audio)

    def subtitle_streams(self) -> Tuple[Stream, ...]:
        return tuple(s for s in self.streams if s.is_subtitle)

    def attachments(self) -> Tuple[Stream, ...]:
        return tuple(s for s in self.streams if s.is_attachment)


def _parse_size(value: Any) -> int:
    try:
        size = int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise NumberParseException("size", value) from e
    if size < 0 or size >= 2**64:
        raise NumberParseException("size", value)
    return size


def _parse_duration(value: Any) -> float:
    try:
        duration = float(str(value).strip())
    except (TypeError, ValueError) as e:
        raise NumberParseException("duration", value) from e
    if duration != duration:  # NaN
        raise NumberParseException("duration", value)
    return duration
