"""Batch orchestration over a directory of saved university pages.

Layout::

    <html_root>/<University_Name>/student_life.html
                                 /academics.html
                                 /...

Each page is matched to its config prefix by file name, extracted on its
own, and the per-page results are merged into one flat dict.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from campusparser.config import ExtractionConfig, page_prefix_from_filename
from campusparser.engine import Extractor, process_rankings
from campusparser.output import save_results
from campusparser.validator import report_data_integrity, validate_data_integrity

logger = logging.getLogger(__name__)

# A directory only counts as a university once this page has been saved.
MARKER_PAGE = "student_life.html"


@dataclass
class BatchSummary:
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


def discover_universities(html_root: str | Path) -> list[str]:
    root = Path(html_root)
    if not root.is_dir():
        return []
    return sorted(
        p.name for p in root.iterdir()
        if p.is_dir() and (p / MARKER_PAGE).exists()
    )


def process_university(
    directory: str | Path,
    config: ExtractionConfig,
    *,
    on_error: str = "null",
) -> dict[str, Any]:
    """Extract every configured page in *directory* into one result dict."""
    directory = Path(directory)
    merged: dict[str, Any] = {}
    for page in sorted(directory.glob("*.html")):
        prefix = page_prefix_from_filename(page.name)
        page_config = config.for_page(prefix)
        if not len(page_config):
            logger.info("No config found for page %s", prefix)
            continue
        logger.debug("Processing %s/%s", directory.name, page.name)
        html = page.read_text(encoding="utf-8")
        merged.update(Extractor(page_config, on_error=on_error).extract(html))

    report_data_integrity(directory.name, validate_data_integrity(merged, config))
    return process_rankings(merged)


def process_all(
    html_root: str | Path,
    config: ExtractionConfig,
    out_dir: str | Path,
    *,
    universities: list[str] | None = None,
    max_workers: int = 4,
    on_error: str = "null",
) -> BatchSummary:
    """Extract and save each university concurrently.

    One university failing is logged and counted; the batch carries on.
    """
    html_root = Path(html_root)
    names = universities if universities is not None else discover_universities(html_root)
    summary = BatchSummary()

    def _one(name: str) -> str:
        directory = html_root / name
        if not directory.is_dir():
            raise FileNotFoundError(f"University directory not found: {directory}")
        data = process_university(directory, config, on_error=on_error)
        save_results(data, name, out_dir)
        return name

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = {executor.submit(_one, name): name for name in names}
        for future in as_completed(futures):
            name = futures[future]
            try:
                future.result()
            except Exception as exc:
                logger.warning("%s failed: %s", name, exc)
                summary.failed[name] = str(exc)
            else:
                logger.info("%s completed", name)
                summary.succeeded.append(name)

    summary.succeeded.sort()
    return summary
