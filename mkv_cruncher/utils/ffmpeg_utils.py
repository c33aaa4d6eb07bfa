"""
This module provides small helpers around the ffmpeg command line.
"""

import os
import shlex
import subprocess
from typing import List, Optional, Tuple

# Keys of the `-progress` output forwarded to the reporter. Everything else
# (bitrate, frame, fps, ...) is ignored.
PROGRESS_KEYS = frozenset({"speed", "out_time_ms", "progress"})


def display_cmd(cmd_list: List[str]) -> str:
    """
    Creates a display-friendly, correctly quoted version of a command for logging.

    Args:
        cmd_list: The command as a list of arguments.

    Returns:
        The command as a single string, quoted for the current platform.
    """
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def parse_progress_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Parses one line of ffmpeg's `-progress` output.

    ffmpeg writes blocks of `key=value` lines, for example::

        out_time_ms=12345678
        speed=2.31x
        progress=continue

    Args:
        line: A single line read from ffmpeg's stdout.

    Returns:
        The `(key, value)` pair for a recognized key, or None for unknown keys
        and lines that are not `key=value` records.
    """
    key, sep, value = line.strip().partition("=")
    if not sep or key not in PROGRESS_KEYS:
        return None
    return key, value.strip()
