"""Text normalisation and scalar casting.

Everything here is a pure function of its input text.  ``None`` always
means "no data" and is passed straight through.
"""

from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")

# Thousands-separated form first, otherwise a plain digit run; both may carry
# a sign and a decimal part.
_NUMBER_RE = re.compile(r"[-+]?(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?")

_TRUE_WORDS = frozenset({"true", "yes", "y", "1", "on"})
_FALSE_WORDS = frozenset({"false", "no", "n", "0", "off"})

_SAT_PREFIX_RE = re.compile(r"^\s*SATs?\s+on\s+1600\s+scale", re.IGNORECASE)
# The page glues label, range and percentage together ("1400-160097%"), so the
# range bounds are what separate one number from the next.  Both bounds of a
# bucket have the same digit count ("800-999", "1400-1600").
_SAT_PAIR_RE = re.compile(
    r"(?:(?P<low4>\d{4})\s*-\s*(?P<high4>\d{4})|(?P<low3>\d{3})\s*-\s*(?P<high3>\d{3}))"
    r"\s*(?P<pct>\d+(?:\.\d+)?)\s*%"
)


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and strip the ends."""
    return _WS_RE.sub(" ", text).strip()


def _to_number(raw: str) -> int | float:
    value = float(raw)
    if "." not in raw and value.is_integer():
        return int(value)
    return value


def parse_number(text: str | None) -> int | float | None:
    """Return the first numeric token in *text*, or None.

    ``"1,234.50 students"`` -> ``1234.5``; integral tokens come back as int.
    """
    if text is None:
        return None
    match = _NUMBER_RE.search(text)
    if not match:
        return None
    return _to_number(match.group(0).replace(",", ""))


def parse_boolean(text: str | None) -> bool | None:
    if text is None:
        return None
    word = normalize_whitespace(text).lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def cast_value(text: str | None, field_type: str) -> Any:
    """Cast extracted *text* to the scalar named by *field_type*.

    Cast failures resolve to None; this never raises for bad data.
    ``array`` and ``object`` are shaped by the engine, not here, so they
    cast to None.
    """
    if text is None:
        return None
    if field_type == "number":
        return parse_number(normalize_whitespace(text))
    if field_type == "boolean":
        return parse_boolean(text)
    if field_type == "string":
        return normalize_whitespace(text)
    if field_type in ("array", "object"):
        return None
    # raw, custom
    return text


def parse_sat_scale(text: str | None) -> dict[str, int | float] | None:
    """Parse a concatenated SAT score distribution.

    ``"SATs on 1600 scale1400-160097%1200-139992%"`` ->
    ``{"1400-1600": 97, "1200-1399": 92}``.  Returns None when no
    range/percentage pair is present (e.g. ``"N/A"``).
    """
    if not text:
        return None
    body = _SAT_PREFIX_RE.sub("", normalize_whitespace(text), count=1)
    scores: dict[str, int | float] = {}
    for match in _SAT_PAIR_RE.finditer(body):
        low = match.group("low4") or match.group("low3")
        high = match.group("high4") or match.group("high3")
        scores[f"{low}-{high}"] = _to_number(match.group("pct"))
    if not scores:
        logger.debug("No SAT score ranges found in %r", text[:80])
        return None
    return scores
