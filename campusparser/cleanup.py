"""Domain cleanup rules for array and object fields.

The profile pages glue labels and values together ("Male60.7%",
"First-year StudentsYes", "Independent100%").  Which repair applies is
decided by markers in the field path; the rule is resolved once per field
when an :class:`~campusparser.engine.Extractor` is built.

Every rule is idempotent: running it on its own output changes nothing.
"""

from __future__ import annotations

import re
from enum import StrEnum

from campusparser.casting import normalize_whitespace, parse_number


class ArrayRule(StrEnum):
    NONE = "none"
    SPLIT_COMBINED_LABEL = "split_combined_label"
    DROP_PERCENTAGE_ONLY = "drop_percentage_only"


class ValueRule(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    PERCENTAGE = "percentage"
    YES_NO = "yes_no"


_COMBINED_LABEL_RE = re.compile(r"^([A-Za-z\s]+)(\d+%)$")
_PERCENTAGE_ONLY_RE = re.compile(r"^\d+%$")
_PERCENTAGE_RE = re.compile(r"\d+(?:\.\d+)?%")
_YES_NO_RE = re.compile(r"(Yes|No)$")
_TIME_LABEL_RE = re.compile(r"\s+(full time|part time)$", re.IGNORECASE)

_PARTICIPATION_MARKERS = (
    "studentParticipationInSpecialStudyOptions",
    "studentParticipationInSpecialAcademicPrograms",
)
_PERCENTAGE_MARKERS = (
    "GenderDistribution",
    "EthnicDiversity",
    "classSizes",
    "studentDemographics",
    "greekLife",
)
_FACULTY_COMPOSITION_MARKER = "facultyAndClasses"
_FACULTY_COUNT_MARKER = "totalFaculty"
_HOUSING_MARKER = "studentsRequiredToLiveInSchoolHousing"
_TIME_KEYS = frozenset({"full_time", "part_time"})


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------

def array_rule_for(path: str) -> ArrayRule:
    if "greekLife" in path and "undergraduate" in path:
        return ArrayRule.SPLIT_COMBINED_LABEL
    if any(marker in path for marker in _PARTICIPATION_MARKERS):
        return ArrayRule.DROP_PERCENTAGE_ONLY
    return ArrayRule.NONE


def split_combined_labels(items: list[str]) -> list[str]:
    """``"Independent100%"`` -> ``"Independent"``, ``"100%"``."""
    out: list[str] = []
    for item in items:
        match = _COMBINED_LABEL_RE.match(item)
        if match:
            out.append(match.group(1).strip())
            out.append(match.group(2))
        else:
            out.append(item)
    return out


def drop_percentage_only(items: list[str]) -> list[str]:
    return [item for item in items if not _PERCENTAGE_ONLY_RE.match(item.strip())]


def apply_array_rule(rule: ArrayRule, items: list[str]) -> list[str]:
    if rule is ArrayRule.SPLIT_COMBINED_LABEL:
        return split_combined_labels(items)
    if rule is ArrayRule.DROP_PERCENTAGE_ONLY:
        return drop_percentage_only(items)
    return items


# ---------------------------------------------------------------------------
# Object sub-values
# ---------------------------------------------------------------------------

def strips_time_label(path: str, key: str) -> bool:
    return _FACULTY_COMPOSITION_MARKER in path and key in _TIME_KEYS


def value_rule_for(path: str, key: str) -> ValueRule:
    if _FACULTY_COUNT_MARKER in path and key in _TIME_KEYS:
        return ValueRule.NUMBER
    if any(marker in path for marker in _PERCENTAGE_MARKERS):
        return ValueRule.PERCENTAGE
    if _HOUSING_MARKER in path:
        return ValueRule.YES_NO
    return ValueRule.TEXT


def clean_object_value(
    text: str | int | float,
    rule: ValueRule,
    *,
    strip_label: bool = False,
) -> str | int | float:
    """Normalise *text*, then apply *rule*; falls back to the cleaned string."""
    if isinstance(text, (int, float)):
        return text
    cleaned = normalize_whitespace(text)
    if strip_label:
        cleaned = _TIME_LABEL_RE.sub("", cleaned)

    if rule is ValueRule.NUMBER:
        number = parse_number(cleaned)
        return cleaned if number is None else number
    if rule is ValueRule.PERCENTAGE:
        match = _PERCENTAGE_RE.search(cleaned)
        return match.group(0) if match else cleaned
    if rule is ValueRule.YES_NO:
        match = _YES_NO_RE.search(cleaned)
        return match.group(1) if match else cleaned
    return cleaned
