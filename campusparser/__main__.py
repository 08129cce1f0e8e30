"""CLI entry point: python -m campusparser [options]"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from campusparser.batch import BatchSummary, process_all
from campusparser.config import load_config
from campusparser.errors import ConfigError
from campusparser.output import build_unified_output

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="campusparser",
        description=(
            "Extract structured university profile data from saved HTML pages\n"
            "using a declarative per-field configuration."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--html-dir", default="./data/html", metavar="DIR",
                        help="Directory of per-university page folders (default: ./data/html)")
    parser.add_argument("--config", default="./data/extraction-config.json", metavar="FILE",
                        help="Field configuration, JSON or YAML (default: ./data/extraction-config.json)")
    parser.add_argument("--out", default="./output", metavar="DIR",
                        help="Output directory for per-university JSON (default: ./output)")
    parser.add_argument("--university", default=None, metavar="NAME",
                        help="Process a single university folder instead of all of them")
    parser.add_argument("--unified", action="store_true", default=False,
                        help="Only rebuild the unified JSON from existing output files")
    parser.add_argument("--unified-path", default="./output-unified.json", metavar="FILE",
                        help="Unified JSON destination (default: ./output-unified.json)")
    parser.add_argument("--workers", type=int, default=4, metavar="N",
                        help="Universities processed concurrently (default: 4)")
    parser.add_argument("--strict", action="store_true", default=False,
                        help="Abort a university on the first config error instead of nulling the field")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: INFO)")
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _print_banner(console: Console, args: argparse.Namespace) -> None:
    console.print(
        Panel.fit(
            f"[bold cyan]campusparser[/bold cyan]\n"
            f"HTML dir:    [green]{args.html_dir}[/green]\n"
            f"Config:      [green]{args.config}[/green]\n"
            f"Output:      [yellow]{args.out}[/yellow]\n"
            f"University:  {args.university or 'all'}\n"
            f"Workers:     {args.workers}\n"
            f"Config errs: {'abort university' if args.strict else 'null field'}",
            border_style="cyan",
            title="[bold]Configuration[/bold]",
        ),
    )


def _print_summary(console: Console, summary: BatchSummary) -> None:
    console.print()
    console.print(Rule("[bold cyan]Batch Summary[/bold cyan]"))
    console.print(f"  [bold]Total universities :[/bold] {summary.total}")
    console.print(f"  [bold]Successful         :[/bold] [green]{len(summary.succeeded)}[/green]")
    console.print(f"  [bold]Failed             :[/bold] [red]{len(summary.failed)}[/red]")
    if summary.failed:
        tbl = Table(
            title=f"[bold red]Failed Universities ({len(summary.failed)})[/bold red]",
            box=box.SIMPLE_HEAVY,
        )
        tbl.add_column("University", style="cyan", no_wrap=True)
        tbl.add_column("Reason", style="red")
        for name, reason in sorted(summary.failed.items()):
            tbl.add_row(name, reason)
        console.print(tbl)
    console.print()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    console = Console()

    if args.unified:
        build_unified_output(args.out, args.unified_path)
        return 0

    _print_banner(console, args)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    universities = [args.university] if args.university else None
    summary = process_all(
        args.html_dir,
        config,
        Path(args.out),
        universities=universities,
        max_workers=args.workers,
        on_error="raise" if args.strict else "null",
    )
    _print_summary(console, summary)

    if not summary.succeeded:
        return 1
    if args.university is None:
        build_unified_output(args.out, args.unified_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
