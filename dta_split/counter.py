"""Spectrum counting pass over a concatenated DTA file."""

import logging
from pathlib import Path
from typing import Optional

from .boundary import RecordBoundaryDetector
from .exceptions import SourceFileError, SplitIOError

logger = logging.getLogger(__name__)

# Undecodable bytes survive a read/write round trip unchanged
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def count_spectra(
    source_path: Path,
    detector: Optional[RecordBoundaryDetector] = None,
    debug_level: int = 1,
) -> int:
    """Count the separator lines in a _dta.txt file.

    Args:
        source_path: Concatenated DTA file
        detector: Boundary detector to use (a default one is created if omitted)
        debug_level: Verbosity gate for debug messages

    Returns:
        Number of spectra found; 0 if the file has no recognizable separators

    Raises:
        SourceFileError: If the file does not exist
        SplitIOError: If reading fails part way through
    """
    detector = detector or RecordBoundaryDetector()
    source_path = Path(source_path)

    if debug_level >= 2:
        logger.debug(f"Counting the number of spectra in the source _dta.txt file: {source_path.name}")

    spectra_count = 0
    try:
        with open(source_path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as reader:
            for data_line in reader:
                if data_line.isspace():
                    continue
                if detector.is_boundary(data_line.rstrip("\r\n")):
                    spectra_count += 1
    except FileNotFoundError as exc:
        raise SourceFileError(
            f"Source file not found: {source_path}", metadata={"path": str(source_path)}
        ) from exc
    except OSError as exc:
        raise SplitIOError(
            f"Error counting the number of spectra in '{source_path}'; {exc}",
            metadata={"path": str(source_path)},
        ) from exc

    if debug_level >= 1:
        logger.debug(f"Spectrum count in source _dta.txt file: {spectra_count}")

    return spectra_count
