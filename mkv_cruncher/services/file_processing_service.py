"""
Provides services for discovering container files and cleaning up staged outputs.

This module contains the logic for the first and last steps of a batch:
- Finding the containers to process in the input directory, optionally recursing
  into subdirectories, in a deterministic (sorted) order.
- Purging partially written files from the intermediate directory when a batch
  has to be aborted.
"""

from pathlib import Path
from typing import List, Tuple

from loguru import logger


def name_matches(path: Path, extension: str) -> bool:
    """True when the file name contains the container extension (case-insensitive)."""
    return extension.lower() in path.name.lower()


class ProcessFiles:
    """
    Discovers the container files to be processed under a source directory.

    Only regular files whose name contains the container extension are picked up.
    The result is sorted by path relative to the source directory, so a batch always
    runs in the same order.

    Attributes:
        source_dir (Path): The directory that was scanned.
        files (Tuple[Path, ...]): The discovered files, sorted.
    """

    def __init__(self, source_dir: Path, extension: str, recursive: bool = False):
        """
        Args:
            source_dir: The input directory.
            extension: The container extension to look for (e.g. ".mkv").
            recursive: Whether to descend into subdirectories.
        """
        self.source_dir = source_dir
        self.extension = extension
        self.recursive = recursive
        self.files: Tuple[Path, ...] = tuple()
        self.set_files_to_process()

    def set_files_to_process(self):
        if not self.source_dir.is_dir():
            logger.error(f"Input directory does not exist: {self.source_dir}")
            self.files = tuple()
            return

        candidates = self.source_dir.rglob("*") if self.recursive else self.source_dir.iterdir()
        found = [p for p in candidates if p.is_file() and name_matches(p, self.extension)]
        found.sort(key=lambda p: p.relative_to(self.source_dir).as_posix())
        self.files = tuple(found)
        logger.debug(
            f"Found {len(self.files)} '{self.extension}' files under {self.source_dir}"
            f"{' (recursive)' if self.recursive else ''}"
        )


def purge_staged_files(directory: Path, extension: str) -> List[Path]:
    """
    Deletes every file directly inside `directory` whose name contains `extension`.

    Used to roll back partial work in the intermediate directory after a fatal
    failure. Deletion errors are logged and the purge carries on.

    Returns:
        The files that were removed.
    """
    removed: List[Path] = []
    if not directory.is_dir():
        return removed

    for entry in sorted(directory.iterdir()):
        if not entry.is_file() or not name_matches(entry, extension):
            continue
        try:
            entry.unlink()
            removed.append(entry)
            logger.info(f"Removed intermediate file {entry.name}")
        except OSError as e:
            logger.error(f"Failed to remove intermediate file {entry}: {e}")
    return removed
