from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.settings import Settings
from ..domain.exceptions import (
    EncodingException,
    FinalizeException,
    PreconditionException,
    ProbeException,
    StagedCleanupException,
)
from ..services.command_builder import build_encode_command
from ..services.file_processing_service import ProcessFiles, purge_staged_files
from ..services.output_finalizer import OutputFinalizer, remove_partial_output
from ..services.probe_service import probe_file
from ..services.reporting_service import Reporter
from ..services.stream_selector import (
    select_attachments,
    select_audio,
    select_subtitles,
    should_transcode_video,
)
from ..services.transcode_executor import TranscodeExecutor
from ..utils.format_utils import format_minutes_seconds


class Stage(str, Enum):
    ENCODE = "encode"
    FINALIZE = "finalize"


@dataclass
class BatchResult:
    """Outcome of one batch run."""

    processed: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed_file: Optional[Path] = None
    failed_stage: Optional[Stage] = None
    error: Optional[Exception] = None
    elapsed: timedelta = timedelta(0)

    @property
    def succeeded(self) -> bool:
        return self.failed_file is None


class CrunchPipeline:
    """
    Drives a whole batch: discover, then probe, select, encode and finalize each
    file in turn.

    Files are processed strictly one after another. A file that cannot be probed
    (or has no video stream) is skipped; an encode or finalize failure stops the
    batch and purges the intermediate directory.
    """

    def __init__(
        self,
        settings: Settings,
        reporter: Optional[Reporter] = None,
        finalizer: Optional[OutputFinalizer] = None,
    ):
        self.settings = settings
        self.reporter = reporter or Reporter()
        self.finalizer = finalizer or OutputFinalizer(settings)

    def discover_files(self) -> List[Path]:
        handler = ProcessFiles(
            self.settings.input_dir,
            self.settings.container_extension,
            recursive=self.settings.recursive,
        )
        return list(handler.files)

    def run(self) -> BatchResult:
        logger.info(f"Reading directory {self.settings.input_dir}")
        files = self.discover_files()
        result = BatchResult()
        if not files:
            logger.info("No files to process.")
            return result

        started = datetime.now()
        try:
            for position, path in enumerate(files, start=1):
                if not self.process_single_file(path, position, len(files), result):
                    break
        except Exception:
            logger.exception("Unexpected error during batch processing.")
            self._rollback()
            raise
        finally:
            result.elapsed = datetime.now() - started

        if not result.succeeded:
            logger.error(
                f"Batch stopped: {result.failed_stage.value} failed for "
                f"'{result.failed_file.name}': {result.error}"
            )
            self._rollback()
        elif len(result.processed) > 1:
            logger.info(
                f"Finished processing all files in {format_minutes_seconds(result.elapsed)}"
            )
        return result

    def process_single_file(
        self, path: Path, position: int, total: int, result: BatchResult
    ) -> bool:
        """
        Runs the pipeline for one file and records the outcome in `result`.

        Returns:
            False when the batch must stop, True otherwise.
        """
        started = datetime.now()
        self.reporter.file_started(path.name, position, total)

        try:
            media_file = probe_file(path, self.settings.ffprobe_binary)
            transcode_video = should_transcode_video(media_file, self.settings, self.reporter)
        except (ProbeException, PreconditionException) as e:
            logger.error(f"Skipping '{path.name}': {e}")
            result.skipped.append(path)
            return True

        subtitles = select_subtitles(media_file, self.settings, self.reporter)
        audio = select_audio(media_file, self.settings, self.reporter)
        attachments = select_attachments(media_file, self.settings, self.reporter)

        if self.settings.dry_run:
            result.processed.append(path)
            self.reporter.file_finished(path.name, datetime.now() - started)
            return True

        command = build_encode_command(
            path,
            media_file,
            transcode_video,
            subtitles,
            audio,
            attachments,
            self.settings,
            reporter=self.reporter,
        )
        output_path = command.output_path
        executor = TranscodeExecutor(
            command, self.settings, self.reporter, duration_seconds=media_file.duration
        )
        try:
            executor.run()
        except EncodingException as e:
            remove_partial_output(output_path)
            self._fail(result, path, Stage.ENCODE, e)
            return False

        if self.finalizer.active:
            try:
                self.finalizer.finalize(output_path, transcode_video)
            except FinalizeException as e:
                # After a cleanup failure the destination copy is verified and stays.
                if not isinstance(e, StagedCleanupException):
                    remove_partial_output(self.settings.output_dir / output_path.name)
                self._fail(result, path, Stage.FINALIZE, e)
                return False

        result.processed.append(path)
        self.reporter.file_finished(path.name, datetime.now() - started)
        return True

    @staticmethod
    def _fail(result: BatchResult, path: Path, stage: Stage, error: Exception) -> None:
        result.failed_file = path
        result.failed_stage = stage
        result.error = error

    def _rollback(self) -> None:
        if self.settings.dry_run or self.settings.intermediate_dir is None:
            return
        logger.warning(f"Purging intermediate directory {self.settings.intermediate_dir}")
        purge_staged_files(self.settings.intermediate_dir, self.settings.container_extension)
