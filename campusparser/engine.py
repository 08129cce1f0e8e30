"""Extraction engine: run a field configuration against one HTML document.

Usage::

    from campusparser import Extractor, load_config

    extractor = Extractor(load_config("data/extraction-config.json").for_page("studentLife"))
    result = extractor.extract(html)

Each configured field path yields exactly one key in the result; missing
data is ``None`` for scalars, ``[]`` for arrays and ``{}`` (or only the
resolved sub-keys) for objects.  A call keeps no state beyond its own
:class:`~campusparser.registry.ExtractionContext`, so one extractor can be
shared across threads.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup, Tag

from campusparser.casting import cast_value, normalize_whitespace
from campusparser.cleanup import (
    ArrayRule,
    ValueRule,
    apply_array_rule,
    array_rule_for,
    clean_object_value,
    strips_time_label,
    value_rule_for,
)
from campusparser.config import ExtractionConfig, FieldConfig, FieldType
from campusparser.errors import ConfigError
from campusparser.evaluator import evaluate_field, resolve_text
from campusparser.extractors.rankings import normalize_rankings
from campusparser.registry import ExtractionContext, Handler, get_handler, run_custom
from campusparser.steps import Step, StepAction, apply_steps, filter_by_text, parse_steps

logger = logging.getLogger(__name__)

RANKINGS_FIELD = "overallRankings.rankings"

# Name/value paragraphs of the free-form "list of organisations" blocks.
FLEXIBLE_PAIR_SELECTOR = "p.Paragraph-sc-1iyax29-0.iKkzvP"
_FLEXIBLE_KEY_MAX = 50
_KEY_STRIP_RE = re.compile(r"[^a-z0-9\s]")
_WS_RE = re.compile(r"\s+")

_ON_ERROR_CHOICES = ("raise", "null")


@dataclass
class SubKeyPlan:
    value_rule: ValueRule
    strip_label: bool
    find: list[Step] = field(default_factory=list)
    get_text: list[Step] = field(default_factory=list)


@dataclass
class FieldPlan:
    """A field with its steps parsed and path-derived rules resolved up front."""

    path: str
    config: FieldConfig
    find: list[Step] = field(default_factory=list)
    get_text: list[Step] = field(default_factory=list)
    array_rule: ArrayRule = ArrayRule.NONE
    sub_keys: dict[str, SubKeyPlan] = field(default_factory=dict)
    handler: Handler | None = None


def plan_field(path: str, config: FieldConfig) -> FieldPlan:
    """Compile *config*; malformed steps raise :class:`ConfigError` here."""
    try:
        plan = FieldPlan(
            path=path,
            config=config,
            find=parse_steps(config.find),
            get_text=parse_steps(config.get_text),
        )
        if config.type is FieldType.CUSTOM:
            plan.handler = get_handler(config.custom_function)
        elif config.type is FieldType.ARRAY:
            plan.array_rule = array_rule_for(path)
        elif config.type is FieldType.OBJECT:
            plan.sub_keys = {
                key: SubKeyPlan(
                    value_rule=value_rule_for(path, key),
                    strip_label=strips_time_label(path, key),
                    find=parse_steps(rule.find),
                    get_text=parse_steps(rule.get_text),
                )
                for key, rule in config.object_mapping.items()
            }
    except ConfigError as exc:
        annotated = exc.with_field(path)
        if annotated is exc:
            raise
        raise annotated from exc
    return plan


# ---------------------------------------------------------------------------
# Array / object processors
# ---------------------------------------------------------------------------

def extract_array(elements: list[Tag], plan: FieldPlan) -> list[str]:
    texts: list[str] = []
    for element in elements:
        text = normalize_whitespace(
            resolve_text(element, plan.get_text, plan.config.attribute) or "",
        )
        if text:
            texts.append(text)
    return apply_array_rule(plan.array_rule, texts)


def _matching_elements(elements: list[Tag], sub: SubKeyPlan) -> list[Tag]:
    """Filter *elements* by every ``haveText`` step of *sub*.

    Other step kinds are ignored here; the base elements were already
    selected by the field's own ``find``.
    """
    matched = elements
    for step in sub.find:
        if step.action is StepAction.HAVE_TEXT:
            matched = filter_by_text(matched, step.argument)
    return matched


def extract_mapped_object(elements: list[Tag], sub_keys: dict[str, SubKeyPlan]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, sub in sub_keys.items():
        matched = _matching_elements(elements, sub)
        if not matched:
            continue
        text = resolve_text(matched[0], sub.get_text)
        if text and text.strip():
            obj[key] = clean_object_value(
                text, sub.value_rule, strip_label=sub.strip_label,
            )
    return obj


def flexible_key(name: str) -> str:
    """``"Student Government (SGA)"`` -> ``"studentgovernmentsga"``."""
    key = _KEY_STRIP_RE.sub("", name.lower())
    return _WS_RE.sub("", key)[:_FLEXIBLE_KEY_MAX]


def extract_flexible_object(elements: list[Tag]) -> dict[str, str]:
    """Build keys from name/value paragraph pairs; later pairs win."""
    obj: dict[str, str] = {}
    for element in elements:
        names = element.select(f"{FLEXIBLE_PAIR_SELECTOR}:first-child")
        values = element.select(f"{FLEXIBLE_PAIR_SELECTOR}:last-child")
        if not names or not values:
            continue
        name = names[0].get_text().strip()
        value = values[-1].get_text().strip()
        if not name or not value:
            continue
        key = flexible_key(name)
        if key:
            obj[key] = value
    return obj


def extract_object(soup: BeautifulSoup, plan: FieldPlan) -> dict[str, Any]:
    base = apply_steps(soup, plan.find)
    if plan.config.flexible_mapping:
        return extract_flexible_object(base)
    return extract_mapped_object(base, plan.sub_keys)


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

def _parse_html(html: str | BeautifulSoup) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, "lxml")


class Extractor:
    """Compiled field configuration.

    Args:
        config:   :class:`ExtractionConfig` or a plain mapping that validates
                  as one.
        on_error: ``"raise"`` (default) propagates a field's
                  :class:`ConfigError`, including malformed steps found
                  while compiling; ``"null"`` logs it and stores None for
                  that field only.
    """

    def __init__(
        self,
        config: ExtractionConfig | Mapping[str, Any],
        *,
        on_error: str = "raise",
    ) -> None:
        if on_error not in _ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be 'raise' or 'null'; got {on_error!r}")
        self.config = ExtractionConfig.coerce(config)
        self.on_error = on_error
        self._plans: dict[str, FieldPlan | None] = {}
        for path, cfg in self.config.items():
            try:
                self._plans[path] = plan_field(path, cfg)
            except ConfigError as exc:
                if on_error == "raise":
                    raise
                logger.error("Config error in field %s: %s", path, exc)
                self._plans[path] = None

    def extract(self, html: str | BeautifulSoup) -> dict[str, Any]:
        ctx = ExtractionContext(soup=_parse_html(html))
        result: dict[str, Any] = {}
        for path, plan in self._plans.items():
            if plan is None:
                result[path] = None
                continue
            try:
                result[plan.path] = self._extract_field(ctx, plan)
            except ConfigError as exc:
                if self.on_error == "raise":
                    annotated = exc.with_field(plan.path)
                    if annotated is exc:
                        raise
                    raise annotated from exc
                logger.error("Config error in field %s: %s", plan.path, exc)
                result[plan.path] = None
        return result

    def _extract_field(self, ctx: ExtractionContext, plan: FieldPlan) -> Any:
        config = plan.config
        if plan.handler is not None:
            return run_custom(plan.handler, ctx, plan.path, config)
        if config.type is FieldType.OBJECT:
            return extract_object(ctx.soup, plan)

        evaluation = evaluate_field(
            ctx.soup,
            plan.find,
            field_type=config.type,
            get_text=plan.get_text,
            attribute=config.attribute,
        )
        if config.type is FieldType.ARRAY:
            return extract_array(evaluation.elements, plan)
        if evaluation.text is None:
            logger.debug("No match for %s", plan.path)
        return cast_value(evaluation.text, config.type)


def extract(
    html: str | BeautifulSoup,
    config: ExtractionConfig | Mapping[str, Any],
    *,
    on_error: str = "raise",
) -> dict[str, Any]:
    """Extract every configured field from *html*.  See :class:`Extractor`."""
    return Extractor(config, on_error=on_error).extract(html)


def process_rankings(result: Mapping[str, Any], field_path: str = RANKINGS_FIELD) -> dict[str, Any]:
    """Return a copy of *result* with the ranking list at *field_path* keyed.

    Anything other than a list at *field_path* (missing, None, or an
    already-normalised dict) is left as it is.
    """
    out = dict(result)
    value = out.get(field_path)
    if isinstance(value, list):
        out[field_path] = normalize_rankings(value)
    return out
