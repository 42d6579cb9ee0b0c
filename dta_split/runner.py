"""Job step that splits a dataset's _dta.txt file for cloned search steps."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import List, Optional

from .config import SplitJobConfig, resolve_segment_count
from .exceptions import DtaSplitError
from .logging import get_logger
from .manifest import build_split_manifest, manifest_file_name, write_split_manifest
from .progress import LoggingStatusSink, ProgressReporter, SplitProgress, StatusSink
from .splitter import CloseOutType, SplitResult, split_cdta_file
from .validate import cdta_has_data

logger = get_logger(__name__)


class ResultFiles:
    """Ordered set of file names the job step wants retained."""

    def __init__(self) -> None:
        self._names: List[str] = []

    def add(self, file_name: str) -> None:
        if file_name not in self._names:
            self._names.append(file_name)

    def __contains__(self, file_name: str) -> bool:
        return file_name in self._names

    def __iter__(self):
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


class DtaSplitRunner:
    """Validate, split and summarize one dataset's concatenated DTA file."""

    def __init__(
        self,
        config: SplitJobConfig,
        status_sink: Optional[StatusSink] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.config = config
        self.status_sink = status_sink or LoggingStatusSink(logger)
        self.cancel_event = cancel_event
        self.result_files = ResultFiles()
        self.message = ""

    def run(self) -> SplitResult:
        """Run the job step; never raises."""
        cfg = self.config
        try:
            cdta_path = cfg.cdta_path

            try:
                has_data = cdta_has_data(cdta_path)
            except DtaSplitError as exc:
                return self._fail(exc.message)

            if not has_data:
                self.message = f"The _dta.txt file is empty: {cdta_path.name}"
                logger.error(self.message)
                return SplitResult(status=CloseOutType.NO_INPUT_SPECTRA, message=self.message)

            segment_count = resolve_segment_count(cfg.number_of_cloned_steps)
            source_size = cdta_path.stat().st_size
            started_at = datetime.now(timezone.utc)

            result = split_cdta_file(
                cdta_path,
                segment_count,
                output_dir=cfg.work_dir,
                dataset_name=cfg.dataset_name,
                status_sink=self.status_sink,
                on_file_created=self.result_files.add,
                status_interval=cfg.status_interval_seconds,
                cancel_event=self.cancel_event,
                debug_level=cfg.debug_level,
            )
            if not result.succeeded:
                return self._fail(result.message)

            finished_at = datetime.now(timezone.utc)
            logger.info(
                f"Split {cdta_path.name} into {len(result.output_paths)} segment(s) "
                f"in {(finished_at - started_at).total_seconds():.1f}s"
            )

            if cfg.write_manifest:
                manifest = build_split_manifest(
                    cfg.dataset_name,
                    cdta_path.name,
                    source_size,
                    result,
                    started_at,
                    finished_at,
                )
                manifest_name = manifest_file_name(cfg.dataset_name)
                write_split_manifest(manifest, cfg.work_dir / manifest_name)
                self.result_files.add(manifest_name)

            ProgressReporter(self.status_sink, total_bytes=0).report(
                SplitProgress(100.0, result.spectra_total)
            )
            return result
        except Exception as exc:
            logger.exception("Unexpected error in DTA split job step")
            return self._fail(f"Error in DtaSplit: {exc}")

    def _fail(self, message: str) -> SplitResult:
        self.message = message
        logger.error(message)
        return SplitResult(status=CloseOutType.FAILED, message=message)
