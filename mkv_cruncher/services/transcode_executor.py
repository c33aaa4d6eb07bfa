"""
This module runs a single ffmpeg encode and tracks its lifecycle.

When the source is piped to ffmpeg, a dedicated writer thread feeds stdin while the
calling thread reads ffmpeg's progress output. Both pipes have bounded buffers, so
writing everything first and reading afterwards can deadlock as soon as ffmpeg
blocks on a full stdout. The writer thread is always joined before `run()` returns.
"""

import os
import subprocess
import threading
from enum import Enum
from typing import IO, List, Optional

from loguru import logger

from ..config.settings import Settings
from ..domain.command import EncodeCommand, InlineInput
from ..domain.exceptions import EncoderExitException, EncoderIOException
from ..utils.ffmpeg_utils import display_cmd, parse_progress_line
from .reporting_service import Reporter


class TranscodeState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class _StdinWriter(threading.Thread):
    """Writes a buffer to a pipe, then closes it. Records the error instead of raising."""

    def __init__(self, pipe: IO[bytes], data: bytes):
        super().__init__(name="ffmpeg-stdin-writer", daemon=True)
        self.pipe = pipe
        self.data = data
        self.error: Optional[OSError] = None

    def run(self):
        try:
            self.pipe.write(self.data)
        except OSError as e:  # BrokenPipeError when ffmpeg exits early
            self.error = e
        finally:
            try:
                self.pipe.close()
            except OSError as e:
                if self.error is None:
                    self.error = e


class TranscodeExecutor:
    """
    Runs one `EncodeCommand` through ffmpeg.

    State transitions: NOT_STARTED -> RUNNING -> SUCCEEDED | FAILED. An executor
    is single-use; there is no cancellation or timeout once the encode is running.

    Attributes:
        state: The current `TranscodeState`.
        returncode: ffmpeg's exit status once it has exited, else None.
    """

    def __init__(
        self,
        command: EncodeCommand,
        settings: Settings,
        reporter: Optional[Reporter] = None,
        duration_seconds: float = 0.0,
    ):
        self.command = command
        self.settings = settings
        self.reporter = reporter or Reporter()
        self.duration_seconds = duration_seconds
        self.state = TranscodeState.NOT_STARTED
        self.returncode: Optional[int] = None

    @property
    def cmd_list(self) -> List[str]:
        return [self.settings.ffmpeg_binary, *self.command.arguments]

    def run(self) -> None:
        """
        Spawns ffmpeg, feeds its input, forwards progress and waits for it to exit.

        Raises:
            EncoderIOException: If ffmpeg cannot be started, or reading its output or
                                writing its input fails.
            EncoderExitException: If ffmpeg exits with a non-zero status.
        """
        if self.state != TranscodeState.NOT_STARTED:
            raise RuntimeError(f"TranscodeExecutor already used (state: {self.state.value}).")

        cmd_list = self.cmd_list
        logger.debug(f"Executing: {display_cmd(cmd_list)}")
        inline = isinstance(self.command.input_mode, InlineInput)

        env = os.environ.copy()
        env.update(self.settings.encoder_environment)

        try:
            process = subprocess.Popen(
                cmd_list,
                stdin=subprocess.PIPE if inline else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            self.state = TranscodeState.FAILED
            raise EncoderIOException(f"Could not start '{cmd_list[0]}': {e}") from e

        self.state = TranscodeState.RUNNING
        self.reporter.encode_started(self.command.output_path.name, self.duration_seconds)

        writer: Optional[_StdinWriter] = None
        if inline:
            writer = _StdinWriter(process.stdin, self.command.input_mode.data)
            writer.start()

        read_error: Optional[OSError] = None
        try:
            for raw_line in process.stdout:
                record = parse_progress_line(raw_line.decode("utf-8", errors="replace"))
                if record is not None:
                    self.reporter.progress(*record)
        except OSError as e:
            read_error = e
            process.kill()
        finally:
            process.stdout.close()
            self.returncode = process.wait()
            if writer is not None:
                writer.join()

        self._finish(read_error, writer.error if writer is not None else None)

    def _finish(self, read_error: Optional[OSError], write_error: Optional[OSError]) -> None:
        if self.returncode != 0:
            self.state = TranscodeState.FAILED
            self.reporter.encode_finished(False)
            if read_error is not None:
                raise EncoderIOException(f"Reading ffmpeg output failed: {read_error}") from read_error
            raise EncoderExitException(self.returncode)

        if read_error is not None or write_error is not None:
            self.state = TranscodeState.FAILED
            self.reporter.encode_finished(False)
            error = read_error or write_error
            raise EncoderIOException(f"Communicating with ffmpeg failed: {error}") from error

        self.state = TranscodeState.SUCCEEDED
        self.reporter.encode_finished(True)
