"""Round-robin splitting of concatenated DTA files into segments."""

import logging
import math
import shutil
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from .boundary import RecordBoundaryDetector
from .counter import TEXT_ENCODING, TEXT_ERRORS, count_spectra
from .exceptions import (
    DtaSplitError,
    SegmentWriterError,
    SourceFileError,
    SplitCancelled,
    SplitIOError,
)
from .progress import STATUS_UPDATE_INTERVAL_SECONDS, ProgressReporter, StatusSink
from .terminator import line_terminator_width
from .writer_pool import CDTA_SUFFIX, SegmentWriterPool, segment_file_name

logger = logging.getLogger(__name__)


class CloseOutType(str, Enum):
    """Outcome reported back to the job step."""

    SUCCESS = "success"
    NO_INPUT_SPECTRA = "no_input_spectra"
    FAILED = "failed"


@dataclass(frozen=True)
class SplitPlan:
    """Immutable parameters of one split, computed before streaming starts."""

    source_path: Path
    segment_count: int
    expected_spectra: int = 0
    terminator_width: int = 1

    @property
    def target_spectra_per_segment(self) -> int:
        # Informational only; routing is strict round-robin
        return max(1, math.ceil(self.expected_spectra / self.segment_count))


@dataclass
class SplitResult:
    status: CloseOutType
    message: str = ""
    output_paths: List[Path] = field(default_factory=list)
    spectra_by_segment: List[int] = field(default_factory=list)
    spectra_total: int = 0
    expected_spectra: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == CloseOutType.SUCCESS


def dataset_name_from_path(source_path: Path) -> str:
    """Derive the dataset name from a ``<dataset>_dta.txt`` file name."""
    name = Path(source_path).name
    if name.lower().endswith(CDTA_SUFFIX):
        return name[: -len(CDTA_SUFFIX)]
    return Path(name).stem


def build_plan(
    source_path: Path,
    segment_count: int,
    detector: Optional[RecordBoundaryDetector] = None,
    debug_level: int = 1,
) -> SplitPlan:
    """Probe the source file and compute the split plan.

    The spectrum counting pass only runs when more than one segment is requested.

    Raises:
        SourceFileError: If the source file is missing or unreadable
        SplitIOError: If the counting pass fails
    """
    source_path = Path(source_path)
    segment_count = max(1, segment_count)

    if not source_path.is_file():
        raise SourceFileError(
            f"Source file not found: {source_path}", metadata={"path": str(source_path)}
        )

    terminator_width = line_terminator_width(source_path)

    expected_spectra = 0
    if segment_count > 1:
        expected_spectra = count_spectra(source_path, detector, debug_level=debug_level)
        if expected_spectra == 0:
            logger.warning(
                f"Spectrum count of {source_path.name} is 0; this is unexpected"
            )

    return SplitPlan(
        source_path=source_path,
        segment_count=segment_count,
        expected_spectra=expected_spectra,
        terminator_width=terminator_width,
    )


class RoundRobinSplitter:
    """Distribute the spectra of a concatenated DTA file across N segment files.

    The source is streamed exactly once. Every separator line after the first
    advances the target segment (1, 2, ..., N, 1, ...); body lines, blank lines
    included, are copied verbatim to the current segment. The first spectrum
    routed to segments 2..N is preceded by one blank line.
    """

    def __init__(
        self,
        detector: Optional[RecordBoundaryDetector] = None,
        status_sink: Optional[StatusSink] = None,
        status_interval: float = STATUS_UPDATE_INTERVAL_SECONDS,
        cancel_event: Optional[threading.Event] = None,
        debug_level: int = 1,
    ):
        self.detector = detector or RecordBoundaryDetector()
        self.status_sink = status_sink
        self.status_interval = status_interval
        self.cancel_event = cancel_event
        self.debug_level = debug_level

    def split(
        self,
        plan: SplitPlan,
        output_dir: Path,
        dataset_name: str,
        on_file_created: Optional[Callable[[str], None]] = None,
    ) -> SplitResult:
        """Execute ``plan``, writing segments into ``output_dir``.

        Raises:
            DtaSplitError: On any I/O failure; partial segment files are left in place
        """
        output_dir = Path(output_dir)

        if plan.segment_count == 1:
            return self._rename_single(plan, output_dir, dataset_name, on_file_created)

        if self.debug_level >= 1:
            logger.debug(
                f"Splitting {plan.source_path.name} into {plan.segment_count} segments; "
                f"spectra per segment = {plan.target_spectra_per_segment}"
            )

        source = plan.source_path.resolve()
        for index in range(1, plan.segment_count + 1):
            destination = output_dir / segment_file_name(dataset_name, index)
            if destination.resolve() == source:
                raise SegmentWriterError(
                    f"Split DTA file {destination.name} (segment {index}) would overwrite "
                    f"the source file {plan.source_path}",
                    metadata={"segment": index, "path": str(destination)},
                )

        pool = SegmentWriterPool(
            output_dir,
            dataset_name,
            plan.segment_count,
            on_file_created=on_file_created,
            debug_level=self.debug_level,
        )
        with pool:
            spectra_read = self._stream(plan, pool)

        return SplitResult(
            status=CloseOutType.SUCCESS,
            output_paths=pool.paths,
            spectra_by_segment=pool.spectra_counts,
            spectra_total=spectra_read,
            expected_spectra=plan.expected_spectra,
        )

    def _stream(self, plan: SplitPlan, pool: SegmentWriterPool) -> int:
        """Route every line of the source to a segment; return spectra read."""
        segment_count = plan.segment_count
        width = plan.terminator_width
        is_boundary = self.detector.is_boundary
        cancel_event = self.cancel_event

        try:
            total_bytes = plan.source_path.stat().st_size
            reporter = ProgressReporter(self.status_sink, total_bytes, interval=self.status_interval)

            current = 1
            spectra_read = 0
            bytes_read = 0

            with open(plan.source_path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as reader:
                for raw_line in reader:
                    if cancel_event is not None and cancel_event.is_set():
                        raise SplitCancelled(
                            f"Split of {plan.source_path.name} cancelled after {spectra_read} spectra",
                            metadata={"spectra_read": spectra_read},
                        )

                    data_line = raw_line[:-1] if raw_line.endswith("\n") else raw_line
                    bytes_read += len(data_line.encode(TEXT_ENCODING, TEXT_ERRORS)) + width

                    if not data_line:
                        pool.write_blank(current)
                        continue

                    if is_boundary(data_line):
                        if spectra_read > 0:
                            current = current % segment_count + 1
                            if pool.segment(current).spectra_count == 0:
                                # Blank line at the top of each segment file
                                pool.write_blank(current)

                        spectra_read += 1
                        pool.segment(current).spectra_count += 1

                    reporter.maybe_report(bytes_read, spectra_read)
                    pool.write_line(current, data_line)
        except OSError as exc:
            raise SplitIOError(
                f"Error splitting file {plan.source_path}; {exc}",
                metadata={"path": str(plan.source_path)},
            ) from exc

        return spectra_read

    def _rename_single(
        self,
        plan: SplitPlan,
        output_dir: Path,
        dataset_name: str,
        on_file_created: Optional[Callable[[str], None]],
    ) -> SplitResult:
        """Single segment: rename the source to ``<dataset>_1_dta.txt``."""
        file_name = segment_file_name(dataset_name, 1)
        target = output_dir / file_name
        if target.is_dir():
            raise SplitIOError(
                f"Error renaming file {plan.source_path} to {target}; target is a directory",
                metadata={"source": str(plan.source_path), "target": str(target)},
            )

        if on_file_created:
            on_file_created(file_name)

        if target.resolve() == plan.source_path.resolve():
            return SplitResult(status=CloseOutType.SUCCESS, output_paths=[target])

        try:
            shutil.move(str(plan.source_path), str(target))
        except OSError as exc:
            raise SplitIOError(
                f"Error renaming file {plan.source_path} to {target}; {exc}",
                metadata={"source": str(plan.source_path), "target": str(target)},
            ) from exc

        return SplitResult(status=CloseOutType.SUCCESS, output_paths=[target])


def split_cdta_file(
    source_path: Path,
    segment_count: int,
    output_dir: Optional[Path] = None,
    dataset_name: Optional[str] = None,
    status_sink: Optional[StatusSink] = None,
    on_file_created: Optional[Callable[[str], None]] = None,
    status_interval: float = STATUS_UPDATE_INTERVAL_SECONDS,
    cancel_event: Optional[threading.Event] = None,
    debug_level: int = 1,
) -> SplitResult:
    """Split a concatenated DTA file into ``segment_count`` segment files.

    Segments are written next to the source unless ``output_dir`` is given and
    are named ``<dataset>_<i>_dta.txt``. Failures never raise; they come back
    as a FAILED result carrying the error message.

    Args:
        source_path: The ``<dataset>_dta.txt`` file to split
        segment_count: Number of segments; values below 1 are treated as 1
        output_dir: Directory for the segments (default: the source's directory)
        dataset_name: Dataset name (default: derived from the source file name)
        status_sink: Receives (percent_complete, spectra_processed) while streaming
        on_file_created: Receives each segment file name as it is created
        status_interval: Minimum seconds between status updates
        cancel_event: Checked once per line; when set the split stops and fails
        debug_level: Verbosity gate for debug messages

    Returns:
        SplitResult describing the produced segments or the failure
    """
    source_path = Path(source_path)
    output_dir = Path(output_dir) if output_dir is not None else source_path.parent
    dataset_name = dataset_name or dataset_name_from_path(source_path)
    detector = RecordBoundaryDetector()

    try:
        plan = build_plan(source_path, segment_count, detector, debug_level=debug_level)
        splitter = RoundRobinSplitter(
            detector=detector,
            status_sink=status_sink,
            status_interval=status_interval,
            cancel_event=cancel_event,
            debug_level=debug_level,
        )
        return splitter.split(plan, output_dir, dataset_name, on_file_created=on_file_created)
    except DtaSplitError as exc:
        logger.error(f"Error splitting {source_path}: {exc.message}")
        return SplitResult(status=CloseOutType.FAILED, message=exc.message)
    except OSError as exc:
        logger.error(f"Error splitting {source_path}: {exc}")
        return SplitResult(status=CloseOutType.FAILED, message=f"Error splitting {source_path}; {exc}")
