"""
This module provides the reporters that observe a crunching run.

The stream selector, command builder and transcode executor never log on their own
account; they hand their decisions and progress records to a `Reporter` that is
passed down explicitly from the batch driver. The base `Reporter` ignores every
event, which keeps the pure components usable (and testable) without any logging
sink attached. `LoguruReporter` is the reporter used by the command-line tool: it
writes decisions to the loguru logger and renders encoder progress with tqdm.
"""

from datetime import timedelta
from typing import Optional

from loguru import logger
from tqdm import tqdm

from ..domain.selection import SelectionResult
from ..utils.format_utils import format_elapsed

UNTITLED_TRACK = "Untitled track"


class Reporter:
    """
    The observer interface for a run. Every hook is a no-op here.

    Subclasses override only the events they care about.
    """

    def file_started(self, file_name: str, position: int, total: int) -> None:
        pass

    def selection_summary(self, category: str, selection: SelectionResult) -> None:
        pass

    def video_decision(self, transcode: bool, reason: str) -> None:
        pass

    def note(self, message: str) -> None:
        pass

    def encode_started(self, file_name: str, duration_seconds: float) -> None:
        pass

    def progress(self, key: str, value: str) -> None:
        pass

    def encode_finished(self, succeeded: bool) -> None:
        pass

    def file_finished(self, file_name: str, elapsed: timedelta) -> None:
        pass


class LoguruReporter(Reporter):
    """
    Reports decisions through loguru and encoder progress through a tqdm bar.

    The progress bar's total is the file duration in microseconds, which is the unit
    of ffmpeg's `out_time_ms` progress key (despite its name).
    """

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress
        self._bar: Optional[tqdm] = None

    def file_started(self, file_name: str, position: int, total: int) -> None:
        logger.info(f"Processing file '{file_name}' ({position}/{total})")

    def selection_summary(self, category: str, selection: SelectionResult) -> None:
        kept, total = len(selection), selection.total
        if kept < total:
            logger.info(f"  Keeping {kept}/{total} {category}.")
            # Attachments are only summarized; their names are rarely interesting.
            if category != "attachments":
                for selected in selection:
                    name = selected.stream.display_title() or UNTITLED_TRACK
                    logger.info(f"      {name} ({selected.stream.codec_name})")
        else:
            logger.info(f"  Keeping all {category} ({total}).")

    def video_decision(self, transcode: bool, reason: str) -> None:
        verb = "Transcoding" if transcode else "Copying"
        logger.info(f"  {verb} video stream: {reason}")

    def note(self, message: str) -> None:
        logger.info(f"  {message}")

    def encode_started(self, file_name: str, duration_seconds: float) -> None:
        if not self.show_progress:
            return
        self._bar = tqdm(
            total=max(int(duration_seconds * 1_000_000), 1),
            desc=file_name[:40],
            unit="us",
            unit_scale=True,
            leave=False,
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {postfix} [{elapsed}]",
        )

    def progress(self, key: str, value: str) -> None:
        logger.trace(f"ffmpeg progress {key}={value}")
        if self._bar is None:
            return
        if key == "speed":
            self._bar.set_postfix_str(value.strip())
        elif key == "out_time_ms":
            try:
                position = int(value)
            except ValueError:
                return  # ffmpeg reports N/A before the first frame
            self._bar.n = min(max(position, 0), self._bar.total)
            self._bar.refresh()

    def encode_finished(self, succeeded: bool) -> None:
        if self._bar is not None:
            if succeeded:
                self._bar.n = self._bar.total
                self._bar.refresh()
            self._bar.close()
            self._bar = None

    def file_finished(self, file_name: str, elapsed: timedelta) -> None:
        logger.success(f"Finished '{file_name}' in {format_elapsed(elapsed)}")
