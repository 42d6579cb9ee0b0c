"""CLI entrypoint for the DTA splitter."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .config import DEFAULT_SEGMENT_COUNT, load_config
from .counter import count_spectra
from .exceptions import DtaSplitError
from .logging import configure_logging
from .progress import STATUS_UPDATE_INTERVAL_SECONDS, TqdmStatusSink
from .runner import DtaSplitRunner
from .splitter import CloseOutType, SplitResult, split_cdta_file
from .validate import is_balanced, validate_segments

console = Console()

EXIT_CODES = {
    CloseOutType.SUCCESS: 0,
    CloseOutType.FAILED: 1,
    CloseOutType.NO_INPUT_SPECTRA: 2,
}


def _print_result(result: SplitResult) -> None:
    if not result.succeeded:
        label = "No input spectra" if result.status == CloseOutType.NO_INPUT_SPECTRA else "Split failed"
        console.print(f"[red]{label}: {result.message}[/red]")
        return

    table = Table(title="Segments")
    table.add_column("#", justify="right")
    table.add_column("File")
    table.add_column("Spectra", justify="right")
    for position, path in enumerate(result.output_paths):
        spectra = "-"
        if position < len(result.spectra_by_segment):
            spectra = f"{result.spectra_by_segment[position]:,}"
        table.add_row(str(position + 1), str(path), spectra)
    console.print(table)

    if result.spectra_by_segment:
        console.print(
            f"[green]Split {result.spectra_total:,} spectra "
            f"(expected {result.expected_spectra:,}) into {len(result.output_paths)} segments[/green]"
        )
    else:
        console.print("[green]Single segment: source renamed[/green]")


def cmd_split(args: argparse.Namespace) -> int:
    """Split a _dta.txt file into segments."""
    configure_logging(args.log_level)
    console.print(f"[bold]Splitting {args.source} into {args.segments} segment(s)[/bold]")

    with TqdmStatusSink(desc=args.source.name, disable=args.no_progress) as sink:
        result = split_cdta_file(
            args.source,
            args.segments,
            output_dir=args.output_dir,
            dataset_name=args.dataset,
            status_sink=sink,
            status_interval=args.status_interval,
            debug_level=args.debug_level,
        )
        if result.succeeded:
            sink(100.0, result.spectra_total)

    _print_result(result)
    return EXIT_CODES[result.status]


def cmd_run(args: argparse.Namespace) -> int:
    """Run the job step described by a config file."""
    try:
        cfg = load_config(args.config)
    except DtaSplitError as exc:
        console.print(f"[red]Error: {exc.message}[/red]")
        return EXIT_CODES[CloseOutType.FAILED]

    configure_logging(cfg.logging.level, cfg.logging.log_file, cfg.logging.json_logs)
    console.print(f"[bold]Running DTA split for dataset {cfg.dataset_name}[/bold]")

    with TqdmStatusSink(desc=cfg.dataset_name, disable=args.no_progress) as sink:
        runner = DtaSplitRunner(cfg, status_sink=sink)
        result = runner.run()

    _print_result(result)
    if runner.result_files:
        console.print("Result files to keep:")
        for file_name in runner.result_files:
            console.print(f"  - {file_name}")
    return EXIT_CODES[result.status]


def cmd_count(args: argparse.Namespace) -> int:
    """Count spectra in a _dta.txt file."""
    configure_logging(args.log_level)
    try:
        spectra = count_spectra(args.source)
    except DtaSplitError as exc:
        console.print(f"[red]Error: {exc.message}[/red]")
        return EXIT_CODES[CloseOutType.FAILED]

    console.print(f"{args.source.name}: {spectra:,} spectra")
    if spectra == 0:
        console.print("[yellow]Warning: no spectrum separator lines found[/yellow]")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate produced segment files."""
    configure_logging(args.log_level)
    results = validate_segments(args.segments)

    console.print("\nValidation Results:")
    console.print(f"  Segments checked: {results['segments_checked']}")
    console.print(f"  Spectra by segment: {results['spectra_by_segment']}")
    console.print(f"  Spectra total: {results['spectra_total']:,}")

    ok = True
    if results["missing"]:
        ok = False
        console.print("[red]ERROR: Missing segment files[/red]")
        for path in results["missing"]:
            console.print(f"  - {path}")

    if not is_balanced(results["spectra_by_segment"]):
        ok = False
        console.print("[red]ERROR: Segment spectrum counts differ by more than one[/red]")

    if ok:
        console.print("[green]All validations passed![/green]")
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Split concatenated DTA (_dta.txt) files into round-robin segments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Split into 4 segments next to the source
  python -m dta_split split --source work/MyDataset_dta.txt --segments 4

  # Run the job step from a config file
  python -m dta_split run --config dta_split.yaml

  # Check the produced segments
  python -m dta_split validate work/MyDataset_*_dta.txt
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=False)

    log_level = argparse.ArgumentParser(add_help=False)
    log_level.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO",
        help="Logging level (default: INFO)"
    )

    split_parser = subparsers.add_parser("split", parents=[log_level], help="Split a _dta.txt file")
    split_parser.add_argument("--source", type=Path, required=True, help="Source _dta.txt file")
    split_parser.add_argument(
        "--segments", type=int, default=DEFAULT_SEGMENT_COUNT,
        help=f"Number of segments to create (default: {DEFAULT_SEGMENT_COUNT})"
    )
    split_parser.add_argument("--dataset", type=str, default=None, help="Dataset name (default: from file name)")
    split_parser.add_argument("--output-dir", type=Path, default=None, help="Output directory (default: source directory)")
    split_parser.add_argument(
        "--status-interval", type=float, default=STATUS_UPDATE_INTERVAL_SECONDS,
        help=f"Seconds between progress updates (default: {STATUS_UPDATE_INTERVAL_SECONDS:g})"
    )
    split_parser.add_argument("--debug-level", type=int, default=1, help="Debug message verbosity (default: 1)")
    split_parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")

    run_parser = subparsers.add_parser("run", help="Run the job step from a config file")
    run_parser.add_argument("--config", type=Path, required=True, help="Path to YAML config")
    run_parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")

    count_parser = subparsers.add_parser("count", parents=[log_level], help="Count spectra in a _dta.txt file")
    count_parser.add_argument("--source", type=Path, required=True)

    validate_parser = subparsers.add_parser("validate", parents=[log_level], help="Validate segment files")
    validate_parser.add_argument("segments", type=Path, nargs="+", help="Segment files in segment order")

    return parser


COMMANDS = {
    "split": cmd_split,
    "run": cmd_run,
    "count": cmd_count,
    "validate": cmd_validate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    return COMMANDS[args.command](args)


def _main():
    """Entry point to avoid RuntimeWarning when run as module."""
    sys.exit(main())


if __name__ == "__main__":
    _main()
