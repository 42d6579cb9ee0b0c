import sys
from pathlib import Path
from typing import Callable, List

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def separator_line(dataset: str, scan: int, charge: int = 2) -> str:
    return f'=================================== "{dataset}.{scan}.{scan}.{charge}.dta" =================================='


def cdta_lines(
    spectra: int,
    dataset: str = "SampleA",
    leading_blank: bool = True,
    inner_blank: bool = False,
) -> List[str]:
    """Build the lines of a concatenated DTA file with ``spectra`` records."""
    lines: List[str] = []
    for k in range(1, spectra + 1):
        if leading_blank or k > 1:
            lines.append("")
        scan = k * 10
        lines.append(separator_line(dataset, scan))
        lines.append(f"{1000 + k}.52 2   scan={scan} cs=2")
        lines.append(f"{100 + k}.1 {k}")
        if inner_blank:
            lines.append("")
        lines.append(f"{200 + k}.2 {k * 2}")
    return lines


def parse_records(lines: List[str]) -> List[List[str]]:
    """Group lines into records; lines before the first separator are dropped."""
    from dta_split.boundary import RecordBoundaryDetector

    detector = RecordBoundaryDetector()
    records: List[List[str]] = []
    for line in lines:
        if detector.is_boundary(line):
            records.append([line])
        elif records:
            records[-1].append(line)
    return records


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "cli: marks tests for the command line interface")


@pytest.fixture
def make_cdta(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a ``<dataset>_dta.txt`` file into ``tmp_path``."""

    def _make(
        spectra: int = 10,
        dataset: str = "SampleA",
        newline: str = "\n",
        leading_blank: bool = True,
        inner_blank: bool = False,
        lines: List[str] = None,
    ) -> Path:
        if lines is None:
            lines = cdta_lines(spectra, dataset, leading_blank=leading_blank, inner_blank=inner_blank)
        path = tmp_path / f"{dataset}_dta.txt"
        path.write_bytes((newline.join(lines) + newline).encode("utf-8"))
        return path

    return _make
