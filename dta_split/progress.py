"""Throttled progress reporting for long-running splits."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)

STATUS_UPDATE_INTERVAL_SECONDS = 15.0

# Receives (percent_complete, spectra_processed)
StatusSink = Callable[[float, int], None]


@dataclass(frozen=True)
class SplitProgress:
    percent_complete: float
    spectra_processed: int


def percent_of(bytes_read: int, total_bytes: int) -> float:
    """Percent complete from a byte offset, capped at 100."""
    if total_bytes <= 0:
        return 100.0
    return min(100.0, bytes_read / total_bytes * 100)


class ProgressReporter:
    """Forward progress to a status sink no more often than ``interval`` seconds.

    Sink failures are logged and swallowed so reporting never changes the
    outcome of the operation being observed.
    """

    def __init__(
        self,
        sink: Optional[StatusSink],
        total_bytes: int,
        interval: float = STATUS_UPDATE_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sink = sink
        self.total_bytes = total_bytes
        self.interval = interval
        self._clock = clock
        self._last_update = clock()
        self.last_progress: Optional[SplitProgress] = None

    def maybe_report(self, bytes_read: int, spectra_processed: int) -> bool:
        """Report progress if the interval has elapsed; return True if reported."""
        if self.sink is None:
            return False
        now = self._clock()
        if now - self._last_update < self.interval:
            return False
        self._last_update = now
        self.report(SplitProgress(percent_of(bytes_read, self.total_bytes), spectra_processed))
        return True

    def report(self, progress: SplitProgress) -> None:
        """Deliver ``progress`` to the sink immediately."""
        self.last_progress = progress
        if self.sink is None:
            return
        try:
            self.sink(progress.percent_complete, progress.spectra_processed)
        except Exception as exc:
            logger.warning(f"Status sink raised {exc!r}; continuing")


class LoggingStatusSink:
    """Status sink that writes progress lines to a logger."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.log = log or logger
        self.level = level

    def __call__(self, percent_complete: float, spectra_processed: int) -> None:
        self.log.log(self.level, f"Splitting: {percent_complete:.1f}% complete, {spectra_processed:,} spectra")


class TqdmStatusSink:
    """Status sink backed by a tqdm progress bar measured in percent."""

    def __init__(self, desc: str = "Splitting", disable: bool = False):
        self.bar = tqdm(total=100.0, desc=desc, unit="%", disable=disable,
                        bar_format="{l_bar}{bar}| {n:.1f}/{total:.0f}% [{elapsed}<{remaining}]{postfix}")

    def __call__(self, percent_complete: float, spectra_processed: int) -> None:
        self.bar.n = percent_complete
        self.bar.set_postfix(spectra=spectra_processed, refresh=False)
        self.bar.refresh()

    def close(self) -> None:
        self.bar.close()

    def __enter__(self) -> "TqdmStatusSink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
