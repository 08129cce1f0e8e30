"""campusparser - config-driven field extraction from university profile pages.

Quick usage::

    from campusparser import extract, load_config, process_rankings

    config = load_config("data/extraction-config.json")
    result = extract(html, config.for_page("overallRankings"))
    result = process_rankings(result)

Field rules are plain JSON/YAML::

    {"applying.acceptanceRate": {"find": ["get:div", "haveText:Acceptance rate"],
                                 "getText": ["get:p"], "type": "number"}}
"""

from campusparser.config import (
    CustomFunction,
    ExtractionConfig,
    FieldConfig,
    FieldType,
    load_config,
    page_prefix_from_filename,
)
from campusparser.engine import RANKINGS_FIELD, Extractor, extract, process_rankings
from campusparser.errors import ConfigError, ExtractionError
from campusparser.validator import validate_data_integrity

__version__ = "0.1.0"
__all__ = [
    "RANKINGS_FIELD",
    "ConfigError",
    "CustomFunction",
    "ExtractionConfig",
    "ExtractionError",
    "Extractor",
    "FieldConfig",
    "FieldType",
    "extract",
    "load_config",
    "page_prefix_from_filename",
    "process_rankings",
    "validate_data_integrity",
]
