"""Round-robin splitting of concatenated DTA (_dta.txt) spectrum files."""

from .boundary import BoundaryLine, RecordBoundaryDetector
from .config import SplitJobConfig, load_config, resolve_segment_count
from .counter import count_spectra
from .exceptions import (
    ConfigurationError,
    DtaSplitError,
    SegmentWriterError,
    SourceFileError,
    SplitCancelled,
    SplitIOError,
)
from .progress import LoggingStatusSink, ProgressReporter, SplitProgress, TqdmStatusSink
from .runner import DtaSplitRunner, ResultFiles
from .splitter import (
    CloseOutType,
    RoundRobinSplitter,
    SplitPlan,
    SplitResult,
    build_plan,
    split_cdta_file,
)
from .terminator import line_terminator_width
from .validate import cdta_has_data, validate_segments
from .writer_pool import SegmentWriterPool, segment_file_name

__all__ = [
    "BoundaryLine",
    "RecordBoundaryDetector",
    "SplitJobConfig",
    "load_config",
    "resolve_segment_count",
    "count_spectra",
    "ConfigurationError",
    "DtaSplitError",
    "SegmentWriterError",
    "SourceFileError",
    "SplitCancelled",
    "SplitIOError",
    "LoggingStatusSink",
    "ProgressReporter",
    "SplitProgress",
    "TqdmStatusSink",
    "DtaSplitRunner",
    "ResultFiles",
    "CloseOutType",
    "RoundRobinSplitter",
    "SplitPlan",
    "SplitResult",
    "build_plan",
    "split_cdta_file",
    "line_terminator_width",
    "cdta_has_data",
    "validate_segments",
    "SegmentWriterPool",
    "segment_file_name",
]
