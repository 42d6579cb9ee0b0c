"""Exception hierarchy used across the DTA splitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(eq=False)
class DtaSplitError(RuntimeError):
    message: str
    code: str = "dta_split_error"
    metadata: Dict[str, Any] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.metadata is None:
            self.metadata = {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "metadata": self.metadata}


@dataclass(eq=False)
class ConfigurationError(DtaSplitError):
    code: str = "configuration_error"


@dataclass(eq=False)
class SourceFileError(DtaSplitError):
    """The CDTA source file is missing or cannot be opened."""

    code: str = "source_file_error"


@dataclass(eq=False)
class SplitIOError(DtaSplitError):
    """I/O failure while counting, streaming or renaming."""

    code: str = "split_io_error"


@dataclass(eq=False)
class SegmentWriterError(DtaSplitError):
    """A segment output file could not be created.

    ``metadata["segment"]`` holds the 1-based index of the failing segment.
    """

    code: str = "segment_writer_error"


@dataclass(eq=False)
class SplitCancelled(DtaSplitError):
    code: str = "split_cancelled"
