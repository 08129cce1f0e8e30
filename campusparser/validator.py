"""Post-hoc type checks of an extraction result against its config.

Mismatches are diagnostics only; they never block output.  ``None`` is
always valid (it means the page did not have the data).
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from campusparser.config import ExtractionConfig, FieldType

logger = logging.getLogger(__name__)


def _describe(value: Any) -> str:
    try:
        shown = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        shown = repr(value)
    return f"{type(value).__name__}: {shown}"


def _matches(value: Any, expected: FieldType) -> bool:
    if expected is FieldType.NUMBER:
        return (
            isinstance(value, (int, float))
            and not isinstance(value, bool)
            and not (isinstance(value, float) and math.isnan(value))
        )
    if expected is FieldType.STRING:
        return isinstance(value, str)
    if expected is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if expected is FieldType.ARRAY:
        return isinstance(value, list)
    if expected is FieldType.OBJECT:
        return isinstance(value, dict)
    # raw and custom are free-form
    return True


def check_value(value: Any, expected: FieldType, path: str) -> list[str]:
    if value is None or _matches(value, expected):
        return []
    return [f"{path}: Expected {expected.value} but got {_describe(value)}"]


def validate_data_integrity(
    result: Mapping[str, Any],
    config: ExtractionConfig,
) -> dict[str, list[str]]:
    """Return ``{field path: [messages]}`` for every mismatching field."""
    errors: dict[str, list[str]] = {}
    for path, value in result.items():
        field_config = config.get(path)
        if field_config is None or value is None:
            continue

        problems = check_value(value, field_config.type, path)

        if field_config.type is FieldType.OBJECT and isinstance(value, dict):
            for key, rule in field_config.object_mapping.items():
                if rule.type is not None and key in value:
                    problems.extend(check_value(value[key], rule.type, f"{path}.{key}"))

        if (
            field_config.type is FieldType.ARRAY
            and isinstance(value, list)
            and field_config.get_item_type is not None
        ):
            for idx, item in enumerate(value):
                problems.extend(
                    check_value(item, field_config.get_item_type, f"{path}[{idx}]"),
                )

        if problems:
            errors[path] = problems
    return errors


def report_data_integrity(name: str, errors: Mapping[str, list[str]]) -> None:
    if not errors:
        logger.info("%s: data integrity check passed", name)
        return
    logger.warning("%s: %d field(s) with type mismatches", name, len(errors))
    for path, messages in errors.items():
        for message in messages:
            logger.warning("  %s -> %s", path, message)
