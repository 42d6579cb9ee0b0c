"""Recognition of spectrum separator lines in concatenated DTA files."""

import re
from dataclasses import dataclass
from typing import Optional

# ===== "Dataset.1234.1234.2.dta" =====
SEPARATOR_PATTERN = re.compile(
    r"^\s*={5,}\s+\"(?P<root_name>.+)\.(?P<start_scan>\d+)\.(?P<end_scan>\d+)\."
    r"(?P<charge_state>\d+)\.(?P<file_type>.+)\"\s+={5,}\s*$",
    re.ASCII,
)


@dataclass(frozen=True)
class BoundaryLine:
    """Metadata captured from a separator line."""

    root_name: str
    start_scan: int
    end_scan: int
    charge_state: int
    file_type: str


class RecordBoundaryDetector:
    """Classify lines as spectrum separators or opaque body lines."""

    def __init__(self, pattern: re.Pattern = SEPARATOR_PATTERN):
        self._match = pattern.match

    def is_boundary(self, line: str) -> bool:
        """Return True if ``line`` starts a new spectrum record."""
        # Separator lines always contain '='; skip the regex for body lines
        if "=" not in line:
            return False
        return self._match(line) is not None

    def parse(self, line: str) -> Optional[BoundaryLine]:
        """Parse a separator line, or return None for body lines."""
        match = self._match(line)
        if match is None:
            return None
        return BoundaryLine(
            root_name=match.group("root_name"),
            start_scan=int(match.group("start_scan")),
            end_scan=int(match.group("end_scan")),
            charge_state=int(match.group("charge_state")),
            file_type=match.group("file_type"),
        )
