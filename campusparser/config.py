"""Field configuration schema and loaders.

A configuration maps dot-separated field paths (``"studentLife.greekLife.
undergraduate"``) to :class:`FieldConfig` rules.  The leading path segment
names the source page, which is how :meth:`ExtractionConfig.for_page`
picks the rules that apply to one HTML file.

Config files are JSON or YAML::

    {
      "academics.facultyAndClasses.studentFacultyRatio": {
        "find": ["get:div[data-test-id='ratio']"],
        "getText": ["get:p"],
        "type": "string"
      }
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError, model_validator

from campusparser.errors import ConfigError

logger = logging.getLogger(__name__)


class FieldType(StrEnum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    RAW = "raw"
    ARRAY = "array"
    OBJECT = "object"
    CUSTOM = "custom"


SCALAR_TYPES = frozenset({FieldType.NUMBER, FieldType.STRING, FieldType.BOOLEAN, FieldType.RAW})


class CustomFunction(StrEnum):
    """Closed set of extraction strategies that bypass find/cast."""

    EXTRACT_SPORTS_DATA = "extractSportsData"
    EXTRACT_SAT_SCALE = "extractSatScale"


class ObjectRule(BaseModel):
    """Nested ``{find, getText}`` rule for one ``objectMapping`` sub-key."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    find: list[str] = Field(default_factory=list)
    get_text: list[str] = Field(default_factory=list, alias="getText")
    type: FieldType | None = None


class FieldConfig(BaseModel):
    """How to produce one output field."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    find: list[str] | None = None
    get_text: list[str] = Field(default_factory=list, alias="getText")
    type: FieldType = FieldType.STRING
    attribute: str | None = None
    object_mapping: dict[str, ObjectRule] = Field(default_factory=dict, alias="objectMapping")
    flexible_mapping: bool = Field(default=False, alias="flexibleMapping")
    custom_function: CustomFunction | None = Field(default=None, alias="customFunction")
    get_item_type: FieldType | None = Field(default=None, alias="getItemType")

    @model_validator(mode="after")
    def _check_shape(self) -> FieldConfig:
        if self.type is FieldType.CUSTOM:
            if self.custom_function is None:
                raise ValueError("type 'custom' requires a customFunction")
        elif self.find is None:
            raise ValueError(f"type {self.type.value!r} requires 'find' steps")
        if (
            self.type is FieldType.OBJECT
            and not self.object_mapping
            and not self.flexible_mapping
        ):
            raise ValueError("type 'object' requires objectMapping or flexibleMapping")
        if self.get_item_type is not None and self.get_item_type not in SCALAR_TYPES:
            raise ValueError(f"getItemType must be scalar, got {self.get_item_type.value!r}")
        return self


class ExtractionConfig(RootModel[dict[str, FieldConfig]]):
    """Mapping of field path -> :class:`FieldConfig`."""

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, path: object) -> bool:
        return path in self.root

    def __getitem__(self, path: str) -> FieldConfig:
        return self.root[path]

    def get(self, path: str) -> FieldConfig | None:
        return self.root.get(path)

    def items(self):
        return self.root.items()

    def for_page(self, prefix: str) -> ExtractionConfig:
        """Return the fields whose path starts with ``prefix + "."``."""
        head = prefix + "."
        return ExtractionConfig({k: v for k, v in self.root.items() if k.startswith(head)})

    @classmethod
    def coerce(cls, config: ExtractionConfig | Mapping[str, Any]) -> ExtractionConfig:
        """Validate a plain mapping, passing existing configs through."""
        if isinstance(config, ExtractionConfig):
            return config
        try:
            return cls.model_validate(dict(config))
        except ValidationError as exc:
            raise ConfigError(f"Invalid extraction config: {exc}") from exc


def load_config(path: str | Path) -> ExtractionConfig:
    """Load and validate a JSON or YAML config file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse config {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping of field paths, got {type(data).__name__}")

    try:
        config = ExtractionConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {path}: {exc}") from exc
    logger.info("Loaded %d field rules from %s", len(config), path)
    return config


_PAGE_PREFIXES = {
    "overall_rankings": "overallRankings",
    "campus_info": "campusInfo",
    "applying": "applying",
    "academics": "academics",
    "student_life": "studentLife",
}


def page_prefix_from_filename(filename: str | Path) -> str:
    """Map a saved page file (``campus_info.html``) to its config prefix."""
    stem = Path(filename).name
    if stem.endswith(".html"):
        stem = stem[: -len(".html")]
    return _PAGE_PREFIXES.get(stem, stem)
