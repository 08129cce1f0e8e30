"""JSON persistence for extraction results."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _write_json(path: Path, data: dict | list) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def save_results(data: dict[str, Any], name: str, out_dir: str | Path) -> Path:
    """Write *data* to ``<out_dir>/<name>.json`` and return the path."""
    path = Path(out_dir) / f"{name}.json"
    _write_json(path, data)
    logger.info("Results saved to %s", path)
    return path


def build_unified_output(out_dir: str | Path, dest: str | Path) -> list[dict[str, Any]]:
    """Merge every ``<slug>.json`` in *out_dir* into one document array.

    Each document is ``{"_id": name, "name": name, "slug": slug, **data}``
    with ``name`` being the slug with underscores as spaces.  Unreadable
    files are logged and skipped.
    """
    out_dir = Path(out_dir)
    dest = Path(dest)
    documents: list[dict[str, Any]] = []
    for path in sorted(out_dir.glob("*.json")):
        if path.resolve() == dest.resolve():
            continue
        slug = path.stem
        name = slug.replace("_", " ")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error reading %s: %s", path, exc)
            continue
        if not isinstance(data, dict):
            logger.error("Skipping %s: expected an object, got %s", path, type(data).__name__)
            continue
        documents.append({"_id": name, "name": name, "slug": slug, **data})

    _write_json(dest, documents)
    logger.info("Unified output: %d universities -> %s", len(documents), dest)
    return documents
