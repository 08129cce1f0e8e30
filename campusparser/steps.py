"""Step interpreter: the tiny query language used by field configs.

A step is ``"<action>:<argument>"``.  ``get`` (alias ``find``) expands each
candidate to its descendants matching a CSS selector; ``haveText`` keeps
candidates whose whitespace-normalised text contains the argument.  Action
names are case-insensitive, arguments are not.

An empty candidate set after any step ends evaluation with no match; that
is the normal "not on this page" outcome, not an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from bs4 import Tag
import soupsieve
from soupsieve import SelectorSyntaxError

from campusparser.casting import normalize_whitespace
from campusparser.errors import ConfigError

logger = logging.getLogger(__name__)


class StepAction(StrEnum):
    GET = "get"
    HAVE_TEXT = "haveText"


_ACTION_ALIASES: dict[str, StepAction] = {
    "get": StepAction.GET,
    "find": StepAction.GET,
    "havetext": StepAction.HAVE_TEXT,
}


@dataclass(frozen=True)
class Step:
    action: StepAction
    argument: str
    text: str


def _check_selector(selector: str, step: str) -> None:
    try:
        soupsieve.compile(selector)
    except SelectorSyntaxError as exc:
        raise ConfigError(
            f"Invalid selector {selector!r} in step {step!r}: {exc}", step=step,
        ) from exc


def parse_step(step: str) -> Step:
    """Parse one step string, raising :class:`ConfigError` if malformed."""
    if not isinstance(step, str):
        raise ConfigError(f"Step must be a string, got {step!r}", step=repr(step))
    trimmed = step.strip()
    idx = trimmed.find(":")
    if idx == -1:
        raise ConfigError(f"Invalid step syntax: {step!r}", step=step)
    action_raw = trimmed[:idx].strip()
    argument = trimmed[idx + 1:].strip()
    action = _ACTION_ALIASES.get(action_raw.lower())
    if action is None:
        raise ConfigError(f"Unsupported step action {action_raw!r} in {step!r}", step=step)
    if not argument:
        raise ConfigError(f"Step missing argument: {step!r}", step=step)
    if action is StepAction.GET:
        _check_selector(argument, step)
    return Step(action=action, argument=argument, text=step)


def parse_steps(steps: Iterable[str] | None) -> list[Step]:
    return [parse_step(s) for s in steps or ()]


def select_within(candidates: Sequence[Tag], selector: str, step: str = "") -> list[Tag]:
    """Union of *selector* matches below each candidate, in document order.

    Elements reachable from two candidates appear twice; no dedup.
    """
    matches: list[Tag] = []
    for node in candidates:
        try:
            matches.extend(node.select(selector))
        except SelectorSyntaxError as exc:
            raise ConfigError(
                f"Invalid selector {selector!r} in step {step or selector!r}: {exc}",
                step=step or selector,
            ) from exc
    return matches


def filter_by_text(candidates: Sequence[Tag], needle: str) -> list[Tag]:
    """Keep candidates whose normalised text contains normalised *needle*."""
    wanted = normalize_whitespace(needle)
    return [
        node for node in candidates
        if wanted in normalize_whitespace(node.get_text())
    ]


def apply_steps(
    scope: Tag | Sequence[Tag],
    steps: Iterable[str | Step] | None,
) -> list[Tag]:
    """Run *steps* against *scope* and return the surviving candidates.

    *scope* is a single element (often the whole document) or a list of
    elements.  With no steps the scope itself is returned.
    """
    parsed = [s if isinstance(s, Step) else parse_step(s) for s in steps or ()]
    current: list[Tag] = [scope] if isinstance(scope, Tag) else list(scope)
    for step in parsed:
        if step.action is StepAction.GET:
            current = select_within(current, step.argument, step.text)
        else:
            current = filter_by_text(current, step.argument)
        if not current:
            logger.debug("Step %r matched nothing", step.text)
            return []
    return current
