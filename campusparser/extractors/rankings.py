"""Ranking list normaliser.

Turns ``["#1 in Best Value Schools", "#45 in National Universities (tie)"]``
into ``{"bestValueSchools": 1, "nationalUniversities": 45}``.  Slugging is
lossy: two labels can collapse to one key, and the later entry wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

logger = logging.getLogger(__name__)

_RANK_RE = re.compile(r"^#(\d+)")
_RANK_PREFIX_RE = re.compile(r"^#\d+\s+in\s+", re.IGNORECASE)
_TRAILING_PAREN_RE = re.compile(r"\s*\([^)]*\)\s*$")
_NON_WORD_RE = re.compile(r"\W+")

_STOP_WORDS = frozenset({"the", "a", "an", "and", "or", "of", "in", "on", "at", "to", "for", "with"})

MIN_SLUG_LENGTH = 2
MAX_SLUG_LENGTH = 50


def slugify_label(label: str) -> str | None:
    """camelCase key for *label*, or None when nothing usable remains."""
    tokens = [
        tok for tok in _NON_WORD_RE.sub(" ", label).split()
        if len(tok) > 1 and not tok.isdigit() and tok.lower() not in _STOP_WORDS
    ]
    if not tokens:
        return None
    slug = tokens[0].lower() + "".join(tok.capitalize() for tok in tokens[1:])
    if not MIN_SLUG_LENGTH <= len(slug) <= MAX_SLUG_LENGTH:
        return None
    return slug


def parse_ranking(entry: str) -> tuple[str, int] | None:
    text = entry.strip()
    match = _RANK_RE.match(text)
    if not match:
        return None
    label = _TRAILING_PAREN_RE.sub("", _RANK_PREFIX_RE.sub("", text))
    slug = slugify_label(label)
    if slug is None:
        return None
    return slug, int(match.group(1))


def normalize_rankings(entries: Iterable[str]) -> dict[str, int]:
    rankings: dict[str, int] = {}
    for entry in entries:
        parsed = parse_ranking(entry) if isinstance(entry, str) else None
        if parsed is None:
            logger.debug("Skipping ranking entry %r", entry)
            continue
        key, rank = parsed
        rankings[key] = rank
    return rankings
