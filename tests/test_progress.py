import logging

import pytest

from dta_split.progress import (
    LoggingStatusSink,
    ProgressReporter,
    TqdmStatusSink,
    percent_of,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_reports_are_throttled_to_interval():
    clock = FakeClock()
    updates = []
    reporter = ProgressReporter(lambda pct, n: updates.append((pct, n)), total_bytes=1000, interval=15, clock=clock)

    assert not reporter.maybe_report(100, 1)
    clock.now += 14
    assert not reporter.maybe_report(200, 2)
    clock.now += 1
    assert reporter.maybe_report(300, 3)
    clock.now += 5
    assert not reporter.maybe_report(400, 4)
    clock.now += 15
    assert reporter.maybe_report(500, 5)

    assert [n for _, n in updates] == [3, 5]
    assert [pct for pct, _ in updates] == pytest.approx([30.0, 50.0])
    assert reporter.last_progress.spectra_processed == 5


def test_reporter_without_sink_is_silent():
    reporter = ProgressReporter(None, total_bytes=10, interval=0)

    assert not reporter.maybe_report(5, 1)


def test_sink_exception_is_logged(caplog):
    def broken(pct, n):
        raise ValueError("boom")

    reporter = ProgressReporter(broken, total_bytes=10, interval=0)
    with caplog.at_level(logging.WARNING, logger="dta_split.progress"):
        assert reporter.maybe_report(5, 1)

    assert "boom" in caplog.text


@pytest.mark.parametrize(
    "bytes_read, total, expected",
    [(0, 100, 0.0), (50, 200, 25.0), (250, 200, 100.0), (0, 0, 100.0)],
)
def test_percent_of(bytes_read, total, expected):
    assert percent_of(bytes_read, total) == pytest.approx(expected)


def test_logging_sink(caplog):
    sink = LoggingStatusSink()
    with caplog.at_level(logging.INFO, logger="dta_split.progress"):
        sink(42.0, 1234)

    assert "42.0% complete" in caplog.text
    assert "1,234 spectra" in caplog.text


def test_tqdm_sink_tracks_percent():
    with TqdmStatusSink(disable=True) as sink:
        sink(37.5, 10)
        assert sink.bar.n == pytest.approx(37.5)
