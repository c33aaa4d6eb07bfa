"""
Result types produced by the stream selector.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .media import Stream


@dataclass(frozen=True)
class SelectedStream:
    """A kept stream and its 0-based position among streams of the same kind."""

    index: int
    stream: Stream


@dataclass(frozen=True)
class SelectionResult:
    """
    The ordered keep-list for one stream category.

    `index` values are assigned by enumerating the category in probe order before
    any filtering happens, so they always address the original track (ffmpeg's
    `0:a:<index>` style specifiers) no matter how many tracks were dropped.

    Attributes:
        kept: The surviving streams, in selection order.
        total: How many streams of this category the file has.
    """

    kept: Tuple[SelectedStream, ...]
    total: int

    def __iter__(self) -> Iterator[SelectedStream]:
        return iter(self.kept)

    def __len__(self) -> int:
        return len(self.kept)

    def indices(self) -> List[int]:
        return [s.index for s in self.kept]

    def kept_all(self) -> bool:
        """True when every track of the category survived (and there is at least one)."""
        return bool(self.kept) and len(self.kept) == self.total
