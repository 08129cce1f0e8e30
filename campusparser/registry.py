"""Custom extraction strategies.

Fields with ``type: custom`` skip the generic find/cast pipeline and are
handed to the handler registered for their :class:`CustomFunction`.  The
set is closed: unknown names are rejected when the config is loaded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup

from campusparser.casting import parse_sat_scale
from campusparser.config import CustomFunction, FieldConfig
from campusparser.errors import ConfigError
from campusparser.evaluator import evaluate_field
from campusparser.extractors.sports import SportsSection, extract_sports_data

logger = logging.getLogger(__name__)


@dataclass
class ExtractionContext:
    """Per-document state shared by the fields of one ``extract()`` call."""

    soup: BeautifulSoup
    _sports: SportsSection | None = field(default=None, repr=False)

    @property
    def sports(self) -> SportsSection:
        if self._sports is None:
            self._sports = extract_sports_data(self.soup)
        return self._sports


Handler = Callable[[ExtractionContext, str, FieldConfig], Any]

# Exact suffixes, so e.g. "nonscholarshipSports" never matches "scholarshipSports".
_SPORTS_SUFFIXES: tuple[tuple[str, str], ...] = (
    (".nonscholarshipSports", "nonscholarshipSports"),
    (".scholarshipSports", "scholarshipSports"),
    (".clubSports", "clubSports"),
    (".intramuralRecreationalSports", "intramuralRecreationalSports"),
)


def _sports_handler(ctx: ExtractionContext, path: str, config: FieldConfig) -> Any:
    for suffix, section in _SPORTS_SUFFIXES:
        if path.endswith(suffix):
            return ctx.sports.as_dict()[section]
    logger.debug("No sports section matches field %s", path)
    return None


def _sat_scale_handler(ctx: ExtractionContext, path: str, config: FieldConfig) -> Any:
    if not config.find:
        return None
    evaluation = evaluate_field(
        ctx.soup, config.find, get_text=config.get_text, attribute=config.attribute,
    )
    return parse_sat_scale(evaluation.text)


_HANDLERS: dict[CustomFunction, Handler] = {
    CustomFunction.EXTRACT_SPORTS_DATA: _sports_handler,
    CustomFunction.EXTRACT_SAT_SCALE: _sat_scale_handler,
}


def get_handler(name: CustomFunction | str) -> Handler:
    """Resolve *name* to its handler, raising :class:`ConfigError` if unknown."""
    try:
        return _HANDLERS[CustomFunction(name)]
    except (ValueError, KeyError) as exc:
        raise ConfigError(f"Unknown customFunction {name!r}") from exc


def run_custom(
    handler: Handler,
    ctx: ExtractionContext,
    path: str,
    config: FieldConfig,
) -> Any:
    """Run *handler*; data problems become None, config errors propagate."""
    try:
        return handler(ctx, path, config)
    except ConfigError:
        raise
    except Exception as exc:
        logger.warning("Custom function %s failed for %s: %s", config.custom_function, path, exc)
        return None
