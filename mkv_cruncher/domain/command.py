"""
The encoder invocation built for a single file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class InlineInput:
    """The whole source file, read into memory and piped to ffmpeg's stdin."""

    data: bytes

    def __repr__(self) -> str:
        return f"InlineInput({len(self.data)} bytes)"


@dataclass(frozen=True)
class PathInput:
    """ffmpeg reads the source file from disk itself."""

    path: Path


InputMode = Union[InlineInput, PathInput]


@dataclass(frozen=True)
class EncodeCommand:
    """
    Arguments for one ffmpeg run (without the executable itself).

    Attributes:
        arguments: The ordered ffmpeg argument list; the output path is the last item.
        input_mode: How the source reaches ffmpeg.
        output_path: Where ffmpeg writes its result (staging or final directory).
    """

    arguments: List[str]
    input_mode: InputMode
    output_path: Path

    @property
    def is_inline(self) -> bool:
        return isinstance(self.input_mode, InlineInput)
