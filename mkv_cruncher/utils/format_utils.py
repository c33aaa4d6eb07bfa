"""Human-readable durations and sizes for log lines."""

from datetime import timedelta
from typing import Tuple

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def _minutes_seconds(elapsed: timedelta) -> Tuple[int, int]:
    return divmod(int(elapsed.total_seconds()), 60)


def format_elapsed(elapsed: timedelta) -> str:
    """Per-file duration as "HH:MM:SS"; hours are not wrapped at 24."""
    minutes, seconds = _minutes_seconds(elapsed)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_minutes_seconds(elapsed: timedelta) -> str:
    """Batch duration as "XmYs"."""
    minutes, seconds = _minutes_seconds(elapsed)
    return f"{minutes}m{seconds}s"


def format_size(size: int) -> str:
    """
    Formats a byte count with binary (1024) steps.

    Whole bytes are printed as is; larger sizes get two decimals, which are
    dropped when they are zero: 1536 is "1.50 KB", 2 MiB is "2 MB".
    """
    value = float(max(size, 0))
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{int(value)} B"
    amount = f"{value:.2f}"
    if amount.endswith(".00"):
        amount = amount[:-3]
    return f"{amount} {SIZE_UNITS[unit]}"
