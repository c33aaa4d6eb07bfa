"""
Moves a finished encode from the intermediate directory to its destination.

The intermediate (staging) directory is typically a fast scratch disk; the output
directory is the library itself. The copy is verified by size, and additionally by
digest when the video was re-encoded, before the staged file is removed. Any failure
raises a `FinalizeException`, which stops the batch.
"""

import hashlib
import shutil
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from ..config.settings import Settings
from ..domain.exceptions import (
    ChecksumMismatchException,
    CopyFailedException,
    SizeMismatchException,
    StagedCleanupException,
)
from ..utils.format_utils import format_size

COPY_CHUNK_SIZE = 16 * 1024 * 1024


def copy_file_counting(src: Path, dst: Path) -> int:
    """
    Copies `src` to `dst` and returns the number of bytes written.

    Raises:
        OSError: If reading or writing fails.
    """
    copied = 0
    with src.open("rb") as f_in, dst.open("wb") as f_out:
        while chunk := f_in.read(COPY_CHUNK_SIZE):
            f_out.write(chunk)
            copied += len(chunk)
    shutil.copystat(src, dst)
    return copied


def file_checksum(path: Path) -> str:
    """MD5 digest of a file; used to detect silent copy corruption, not for security."""
    with path.open(mode="rb") as f:
        return hashlib.file_digest(f, "md5").hexdigest()


class OutputFinalizer:
    """
    Relocates staged outputs into the output directory.

    Args:
        settings: The run settings; `output_dir` is the destination.
        copier: Copies a file and returns the number of bytes copied.
        checksum: Computes a digest used to compare source and destination.
    """

    def __init__(
        self,
        settings: Settings,
        copier: Callable[[Path, Path], int] = copy_file_counting,
        checksum: Callable[[Path], str] = file_checksum,
    ):
        self.settings = settings
        self.copier = copier
        self.checksum = checksum

    @property
    def active(self) -> bool:
        """Finalizing is only needed when ffmpeg wrote into an intermediate directory."""
        return self.settings.intermediate_dir is not None

    def finalize(self, staged_path: Path, transcoded_video: bool) -> Path:
        """
        Copies a staged file into the output directory, verifies it and deletes the staged copy.

        Args:
            staged_path: The file ffmpeg wrote into the intermediate directory.
            transcoded_video: Whether the video was re-encoded; such files are also
                              compared by digest.

        Returns:
            The path of the file in the output directory.

        Raises:
            CopyFailedException: If the staged file cannot be read or copied.
            SizeMismatchException: If fewer or more bytes were copied than staged.
            ChecksumMismatchException: If the digests differ.
            StagedCleanupException: If the staged file cannot be deleted.
        """
        destination = self.settings.output_dir / staged_path.name

        try:
            staged_size = staged_path.stat().st_size
            logger.debug(
                f"Copying {staged_path.name} ({format_size(staged_size)}) to {destination.parent}"
            )
            copied = self.copier(staged_path, destination)
        except OSError as e:
            raise CopyFailedException(f"Failed to copy '{staged_path}' to '{destination}': {e}") from e

        if copied != staged_size:
            raise SizeMismatchException(expected=staged_size, copied=copied)

        if transcoded_video:
            try:
                staged_digest = self.checksum(staged_path)
                destination_digest = self.checksum(destination)
            except OSError as e:
                raise CopyFailedException(f"Failed to read back '{destination}': {e}") from e
            if staged_digest != destination_digest:
                raise ChecksumMismatchException(
                    f"Checksum mismatch on '{destination.name}': "
                    f"staged {staged_digest}, destination {destination_digest}."
                )

        self._remove_staged(staged_path)
        logger.debug(f"Finalized {destination}")
        return destination

    @staticmethod
    def _remove_staged(staged_path: Path) -> None:
        try:
            staged_path.unlink()
        except OSError as e:
            raise StagedCleanupException(f"Failed to remove staged file '{staged_path}': {e}") from e


def remove_partial_output(path: Optional[Path]) -> None:
    """Deletes an incomplete ffmpeg output after a failed encode, logging instead of raising."""
    if path is None or not path.exists():
        return
    try:
        path.unlink()
        logger.info(f"Removed incomplete output {path}")
    except OSError as e:
        logger.error(f"Could not remove incomplete output {path}: {e}")
