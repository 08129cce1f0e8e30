"""Field evaluator: locate a field's element and read its text."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from bs4 import Tag

from campusparser.config import FieldType
from campusparser.steps import Step, apply_steps

logger = logging.getLogger(__name__)


@dataclass
class FieldEvaluation:
    """Outcome of resolving a field's ``find`` steps.

    ``elements`` holds every candidate for array fields; ``text`` is the
    first candidate's text for everything else (None on no match).
    """

    text: str | None = None
    elements: list[Tag] = field(default_factory=list)


def _safe_str(val: object) -> str | None:
    """BeautifulSoup attribute values can be str, list or None."""
    if val is None:
        return None
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def resolve_text(
    node: Tag,
    get_text: Sequence[str | Step] | None = None,
    attribute: str | None = None,
) -> str | None:
    """Text of the first ``get_text`` match inside *node*, else of *node*.

    With *attribute* set, that attribute's value is read instead of text;
    a missing attribute gives None.
    """
    target = node
    if get_text:
        inner = apply_steps(node, get_text)
        if inner:
            target = inner[0]
    if attribute:
        return _safe_str(target.get(attribute))
    return target.get_text()


def evaluate_field(
    scope: Tag,
    find: Sequence[str | Step] | None,
    *,
    field_type: FieldType = FieldType.STRING,
    get_text: Sequence[str | Step] | None = None,
    attribute: str | None = None,
) -> FieldEvaluation:
    found = apply_steps(scope, find)
    if not found:
        return FieldEvaluation()
    if field_type is FieldType.ARRAY:
        return FieldEvaluation(elements=found)
    return FieldEvaluation(text=resolve_text(found[0], get_text, attribute))
