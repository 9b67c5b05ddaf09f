# gw2_market/dump/progress.py
"""Live progress line and ETA estimation for the item dump."""
from __future__ import annotations

import math
import sys
import time
from typing import Callable, Optional, TextIO

from tqdm import tqdm

__all__ = [
    "format_duration",
    "format_progress_line",
    "EtaEstimator",
    "ProgressLine",
    "CALCULATING",
    "PROCESSING",
]

CALCULATING = "Calculating..."
PROCESSING = "Processing..."


def format_duration(seconds: float) -> str:
    """
    Format seconds as ``"1h, 2m, 3s"``, rounding up to whole seconds.

    Examples:
        >>> format_duration(0.2)
        '1s'
        >>> format_duration(125)
        '2m, 5s'
    """
    total = max(0, math.ceil(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return ", ".join(parts)


def percent_done(done: int, total: int) -> float:
    """Percentage truncated (not rounded) to two decimals."""
    if total <= 0:
        return 100.0
    return math.floor(done / total * 100 * 100) / 100


def format_progress_line(
        done: int,
        total: int,
        eta: str,
        elapsed_s: float,
        label: str = "Fetching item pages",
) -> str:
    done_str = str(done).rjust(len(str(total)))
    return (
        f"{label}: {done_str}/{total} ({percent_done(done, total):6.2f}%)"
        f" | ETA {eta} | Elapsed {format_duration(elapsed_s)}"
    )


class EtaEstimator:
    """
    Remaining-time estimate from average throughput.

    The estimate is recomputed at most once per ``interval_s`` so the
    displayed value does not flicker at the polling rate.
    """

    def __init__(self, start: float, interval_s: float = 1.0):
        self.start = start
        self.interval_s = interval_s
        self._last_measure = start
        self.text = CALCULATING

    def update(self, done: int, total: int, now: float) -> str:
        remaining = total - done
        if remaining <= 0:
            self.text = PROCESSING
            return self.text

        elapsed = now - self.start
        if done > 0 and elapsed > 0 and now - self._last_measure >= self.interval_s:
            speed = done / elapsed  # chunks per second
            self.text = format_duration(remaining / speed)
            self._last_measure = now

        return self.text


class ProgressLine:
    """Single terminal line rewritten in place on every poll."""

    def __init__(
            self,
            total: int,
            *,
            eta_interval_s: float = 1.0,
            label: str = "Fetching item pages",
            file: Optional[TextIO] = None,
            clock: Callable[[], float] = time.monotonic,
            disable: bool = False,
    ):
        self.total = total
        self.label = label
        self._clock = clock
        self.start = clock()
        self.eta = EtaEstimator(self.start, eta_interval_s)
        self._bar = tqdm(
            total=total,
            bar_format="{desc}",
            file=file or sys.stdout,
            leave=True,
            disable=disable,
        )
        self.last_line = ""

    @property
    def elapsed(self) -> float:
        return self._clock() - self.start

    def update(self, done: int) -> str:
        now = self._clock()
        done = min(done, self.total)
        eta = self.eta.update(done, self.total, now)
        self.last_line = format_progress_line(done, self.total, eta, now - self.start, self.label)
        self._bar.n = done
        self._bar.set_description_str(self.last_line, refresh=True)
        return self.last_line

    def finish(self, message: str) -> None:
        self._bar.set_description_str(message, refresh=True)
        self._bar.close()
        self.last_line = message
