"""Validation of CDTA inputs and split outputs."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

from .boundary import RecordBoundaryDetector
from .counter import TEXT_ENCODING, TEXT_ERRORS, count_spectra
from .exceptions import SourceFileError

logger = logging.getLogger(__name__)


def cdta_has_data(path: Path) -> bool:
    """Return True if the _dta.txt file contains at least one non-blank line.

    Raises:
        SourceFileError: If the file does not exist or cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise SourceFileError(f"_dta.txt file not found: {path}", metadata={"path": str(path)})

    try:
        with open(path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as reader:
            for data_line in reader:
                if not data_line.isspace():
                    return True
    except OSError as exc:
        raise SourceFileError(f"Error reading {path}; {exc}", metadata={"path": str(path)}) from exc

    return False


def validate_segments(
    segment_paths: Iterable[Path],
    detector: Optional[RecordBoundaryDetector] = None,
) -> Dict:
    """Count the spectra in each produced segment file.

    Args:
        segment_paths: Segment files in segment order
        detector: Boundary detector to use

    Returns:
        Validation results dictionary
    """
    detector = detector or RecordBoundaryDetector()
    results = {
        "segments_checked": 0,
        "spectra_by_segment": [],
        "spectra_total": 0,
        "missing": [],
    }

    for path in segment_paths:
        path = Path(path)
        if not path.is_file():
            results["missing"].append(str(path))
            continue

        spectra = count_spectra(path, detector, debug_level=0)
        results["segments_checked"] += 1
        results["spectra_by_segment"].append(spectra)
        results["spectra_total"] += spectra

    if results["missing"]:
        logger.warning(f"{len(results['missing'])} segment file(s) not found")

    return results


def is_balanced(spectra_by_segment: Iterable[int]) -> bool:
    """True if segment spectrum counts differ by at most one."""
    counts = list(spectra_by_segment)
    if not counts:
        return True
    return max(counts) - min(counts) <= 1
