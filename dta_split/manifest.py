"""Split manifest with checksums and execution provenance."""

import hashlib
import json
import platform
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from .splitter import SplitResult


def sha256_of_file(path: Path) -> str:
    """Calculate SHA256 checksum of file."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()


def manifest_file_name(dataset_name: str) -> str:
    return f"{dataset_name}_dta_split_manifest.json"


def build_split_manifest(
    dataset_name: str,
    source_name: str,
    source_size_bytes: int,
    result: SplitResult,
    started_at: datetime,
    finished_at: datetime,
) -> Dict:
    """Describe a completed split.

    Args:
        dataset_name: Dataset name
        source_name: File name of the split source
        source_size_bytes: Size of the source before splitting
        result: Successful split result
        started_at: UTC start time
        finished_at: UTC end time

    Returns:
        Manifest dictionary
    """
    segments = []
    for position, path in enumerate(result.output_paths):
        spectra: Optional[int] = None
        if position < len(result.spectra_by_segment):
            spectra = result.spectra_by_segment[position]
        segments.append(
            {
                "index": position + 1,
                "file_name": path.name,
                "spectra": spectra,
                "file_size_bytes": path.stat().st_size,
                "checksum": f"sha256:{sha256_of_file(path)}",
            }
        )

    return {
        "dataset": dataset_name,
        "source": {"file_name": source_name, "file_size_bytes": source_size_bytes},
        "segment_count": len(result.output_paths),
        "expected_spectra": result.expected_spectra,
        "spectra_total": result.spectra_total,
        "segments": segments,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "elapsed_seconds": (finished_at - started_at).total_seconds(),
        "platform": platform.platform(),
        "created_at": datetime.now(timezone.utc).isoformat(),
    }


def write_split_manifest(manifest: Dict, output_path: Path) -> None:
    """Write manifest to JSON file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(manifest, f, indent=2)
