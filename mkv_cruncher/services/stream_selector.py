"""
This module decides which tracks of a container survive the crunch.

All functions here are pure and deterministic: they look only at the `MediaFile`
and the run `Settings`, and their only side effect is handing a summary of the
decision to the optional `Reporter`. The rules encode a library policy of keeping
original-language (Japanese) audio, English/Japanese/Spanish subtitles and the fonts
needed to render styled subtitles, while dropping commentary tracks, dubs, partial
"signs & songs" subtitles and redundant surround mixes.
"""

from typing import Callable, Iterable, List, Optional, Tuple

from ..config.settings import Settings, TranscodeMode
from ..domain.exceptions import NoVideoStreamException
from ..domain.media import MediaFile, Stream
from ..domain.selection import SelectedStream, SelectionResult
from .reporting_service import Reporter


# ======================================================================================
# Video
# ======================================================================================


def should_transcode_video(
    media_file: MediaFile, settings: Settings, reporter: Optional[Reporter] = None
) -> bool:
    """
    Decides whether the video stream is re-encoded or stream-copied.

    In `auto` mode anything that is not already in the target codec is transcoded.
    Files already in the target codec are only transcoded when they are still large
    for their length: long files (55 minutes or more) are judged against the
    large-file threshold, everything else against the small-file threshold.

    Raises:
        NoVideoStreamException: If the file has no video stream. Callers are expected
                                to check this before asking for a decision.
    """
    transcode, reason = _video_decision(media_file, settings)
    if reporter is not None:
        reporter.video_decision(transcode, reason)
    return transcode


def _video_decision(media_file: MediaFile, settings: Settings) -> Tuple[bool, str]:
    video_streams = media_file.video_streams()
    if not video_streams:
        raise NoVideoStreamException("File has no video stream.")

    if settings.transcode_mode == TranscodeMode.FORCE:
        return True, "forced by configuration"
    if settings.transcode_mode == TranscodeMode.NEVER:
        return False, "disabled by configuration"

    codec = video_streams[0].codec_name.lower()
    target = settings.target_video_codec.lower()
    if codec != target:
        return True, f"codec '{codec}' is not '{target}'"

    if media_file.duration >= settings.long_duration_seconds:
        threshold = settings.large_file_threshold
    else:
        threshold = settings.small_file_threshold

    if media_file.size > threshold:
        return True, f"already '{target}' but {media_file.size} bytes exceeds {threshold}"
    return False, f"already '{target}' and within {threshold} bytes"


# ======================================================================================
# Subtitles
# ======================================================================================


def _subtitle_key(stream: Stream) -> str:
    return stream.title_or_default() or stream.language_or_default()


def _is_japanese_subtitle(stream: Stream, settings: Settings) -> bool:
    title = stream.title_or_default().lower()
    return (
        any(word in title for word in settings.japanese_title_words)
        or stream.language_or_default() == settings.japanese_language
    )


def _has_unwanted_words(title: str, words: Iterable[str]) -> bool:
    title = title.lower()
    return any(title == word or word in title for word in words)


def select_subtitles(
    media_file: MediaFile, settings: Settings, reporter: Optional[Reporter] = None
) -> SelectionResult:
    """
    Selects the subtitle tracks to keep.

    1. Tracks are deduplicated on their title (or their language when untitled); the
       list is stably sorted on that key and the first track per key wins.
    2. Tracks whose title contains an unwanted word (signs, songs, commentary, ...)
       are dropped, unless they are Japanese.
    3. Only tracks in the allowed languages remain.
    4. If any deduplicated track is ASS, every remaining track that is neither ASS
       nor Japanese is dropped, so styled subtitles win over PGS duplicates.

    A file with a single subtitle track keeps it unconditionally.
    """
    all_streams = media_file.subtitle_streams()
    total = len(all_streams)

    if total == 1:
        result = SelectionResult(kept=(SelectedStream(0, all_streams[0]),), total=1)
        _report(reporter, "subtitles", result)
        return result

    candidates = _dedup_sorted(
        [SelectedStream(i, s) for i, s in enumerate(all_streams)],
        key=lambda selected: _subtitle_key(selected.stream),
    )
    has_ass = any(c.stream.codec_name == settings.ass_codec for c in candidates)

    kept = [
        c
        for c in candidates
        if _is_japanese_subtitle(c.stream, settings)
        or not _has_unwanted_words(c.stream.title_or_default(), settings.subtitle_unwanted_words)
    ]
    kept = [c for c in kept if c.stream.language_or_default() in settings.subtitle_languages]
    if has_ass:
        kept = [
            c
            for c in kept
            if c.stream.codec_name == settings.ass_codec
            or c.stream.language_or_default() == settings.japanese_language
        ]

    result = SelectionResult(kept=tuple(kept), total=total)
    _report(reporter, "subtitles", result)
    return result


# ======================================================================================
# Audio
# ======================================================================================


def _is_audio_language_wanted(stream: Stream, settings: Settings) -> bool:
    language = stream.language_or_default()
    return not language or language in settings.audio_languages


def _is_audio_title_wanted(stream: Stream, settings: Settings) -> bool:
    title = stream.title_or_default().lower()
    if any(word in title for word in settings.audio_unwanted_title_words):
        return False
    # Dubs sometimes keep an 'und'/'jpn' tag but are titled "English".
    return not ("eng" in title and "english" in title)


def select_audio(
    media_file: MediaFile, settings: Settings, reporter: Optional[Reporter] = None
) -> SelectionResult:
    """
    Selects the audio tracks to keep.

    Tracks outside the language allow-list, commentary/description tracks and
    English dubs are dropped. If more than one track is left, stereo tracks (or tracks
    with an unknown channel count) are preferred over surround mixes, provided at
    least one exists. A file with a single audio track keeps it unconditionally.
    """
    all_streams = media_file.audio_streams()
    total = len(all_streams)

    if total == 1:
        result = SelectionResult(kept=(SelectedStream(0, all_streams[0]),), total=1)
        _report(reporter, "audio tracks", result)
        return result

    kept = [
        SelectedStream(i, s)
        for i, s in enumerate(all_streams)
        if _is_audio_language_wanted(s, settings) and _is_audio_title_wanted(s, settings)
    ]

    if len(kept) > 1:
        stereo = [k for k in kept if k.stream.channels() in settings.audio_preferred_channels]
        if stereo:
            kept = stereo

    result = SelectionResult(kept=tuple(kept), total=total)
    _report(reporter, "audio tracks", result)
    return result


# ======================================================================================
# Attachments
# ======================================================================================


def _is_font_attachment(stream: Stream, settings: Settings) -> bool:
    name = stream.title_or_default().lower()
    if any(word in name for word in settings.font_filename_words):
        return True
    return settings.keep_extensionless_attachments and "." not in name


def select_attachments(
    media_file: MediaFile, settings: Settings, reporter: Optional[Reporter] = None
) -> SelectionResult:
    """
    Keeps font attachments (needed by ASS subtitles), deduplicated by filename.

    The result is sorted by filename; for duplicate filenames the first attachment
    in the file wins. Running the selection twice gives the same result.
    """
    all_streams = media_file.attachments()
    fonts = [
        SelectedStream(i, s)
        for i, s in enumerate(all_streams)
        if _is_font_attachment(s, settings)
    ]
    kept = _dedup_sorted(fonts, key=lambda selected: selected.stream.title_or_default())

    result = SelectionResult(kept=tuple(kept), total=len(all_streams))
    _report(reporter, "attachments", result)
    return result


# ======================================================================================
# Helpers
# ======================================================================================


def _dedup_sorted(
    streams: List[SelectedStream], key: Callable[[SelectedStream], str]
) -> List[SelectedStream]:
    """Stable-sorts on `key` and keeps the first stream for every key."""
    seen = set()
    unique = []
    for selected in sorted(streams, key=key):
        k = key(selected)
        if k in seen:
            continue
        seen.add(k)
        unique.append(selected)
    return unique


def _report(reporter: Optional[Reporter], category: str, result: SelectionResult) -> None:
    if reporter is not None:
        reporter.selection_summary(category, result)
