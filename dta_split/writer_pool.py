"""Output writers for the split segments."""

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from .counter import TEXT_ENCODING, TEXT_ERRORS
from .exceptions import SegmentWriterError, SplitIOError

logger = logging.getLogger(__name__)

CDTA_SUFFIX = "_dta.txt"


def segment_file_name(dataset_name: str, index: int) -> str:
    """Return the file name for segment ``index`` (1-based)."""
    return f"{dataset_name}_{index}{CDTA_SUFFIX}"


@dataclass
class Segment:
    """One output target of a split."""

    index: int
    path: Path
    writer: TextIO
    spectra_count: int = 0


class SegmentWriterPool:
    """Own one open writer per segment for the duration of a split.

    All writers are created when the pool is opened, before any spectrum is
    written. If segment K cannot be created, segments 1..K-1 are closed again
    and a SegmentWriterError naming segment K is raised.
    """

    def __init__(
        self,
        output_dir: Path,
        dataset_name: str,
        segment_count: int,
        on_file_created: Optional[Callable[[str], None]] = None,
        debug_level: int = 1,
    ):
        """Initialize the pool.

        Args:
            output_dir: Directory to create the segment files in
            dataset_name: Dataset name used to build segment file names
            segment_count: Number of segments to create (>= 1)
            on_file_created: Callback receiving each created file name, used to
                register it as a result file to keep
            debug_level: Verbosity gate for debug messages
        """
        if segment_count < 1:
            raise ValueError("segment_count must be >= 1")

        self.output_dir = Path(output_dir)
        self.dataset_name = dataset_name
        self.segment_count = segment_count
        self.on_file_created = on_file_created
        self.debug_level = debug_level
        self.segments: List[Segment] = []

    def open(self) -> "SegmentWriterPool":
        """Create (or truncate) every segment file."""
        if self.segments:
            raise RuntimeError("Segment writers are already open")

        with ExitStack() as stack:
            segments = []
            for index in range(1, self.segment_count + 1):
                file_name = segment_file_name(self.dataset_name, index)
                path = self.output_dir / file_name

                if path.exists():
                    logger.warning(f"Split DTA file already exists: {path}")

                if self.debug_level >= 3:
                    logger.debug(f"Creating split DTA file {file_name}")

                try:
                    writer = stack.enter_context(
                        open(path, "w", encoding=TEXT_ENCODING, errors=TEXT_ERRORS)
                    )
                except OSError as exc:
                    raise SegmentWriterError(
                        f"Error creating split DTA file {file_name} (segment {index}); {exc}",
                        metadata={"segment": index, "path": str(path)},
                    ) from exc

                segments.append(Segment(index=index, path=path, writer=writer))
                if self.on_file_created:
                    self.on_file_created(file_name)

            # Every writer opened; ownership moves from the stack to the pool
            stack.pop_all()

        self.segments = segments
        return self

    @property
    def paths(self) -> List[Path]:
        return [segment.path for segment in self.segments]

    @property
    def spectra_counts(self) -> List[int]:
        return [segment.spectra_count for segment in self.segments]

    def segment(self, index: int) -> Segment:
        return self.segments[index - 1]

    def write_line(self, index: int, text: str) -> None:
        """Write ``text`` plus a line terminator to segment ``index``."""
        self.segments[index - 1].writer.write(text + "\n")

    def write_blank(self, index: int) -> None:
        self.segments[index - 1].writer.write("\n")

    def close(self) -> None:
        """Flush and close every writer in order 1..N.

        Each writer is closed even if an earlier one fails; the first failure
        is raised afterwards as a SplitIOError.
        """
        first_error: Optional[BaseException] = None
        failed_segment = 0
        for segment in self.segments:
            try:
                segment.writer.flush()
            except OSError as exc:
                if first_error is None:
                    first_error, failed_segment = exc, segment.index
            finally:
                try:
                    segment.writer.close()
                except OSError as exc:
                    if first_error is None:
                        first_error, failed_segment = exc, segment.index

        if first_error is not None:
            raise SplitIOError(
                f"Error closing split DTA file for segment {failed_segment}; {first_error}",
                metadata={"segment": failed_segment},
            ) from first_error

    def __enter__(self) -> "SegmentWriterPool":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.close()
            return
        # Already failing; release the handles without masking the original error
        for segment in self.segments:
            try:
                segment.writer.close()
            except OSError as close_exc:
                logger.warning(f"Error closing segment {segment.index} after failure: {close_exc}")
