"""Sub-extractors for irregular page sections."""

from .rankings import normalize_rankings, slugify_label
from .sports import SportsByGender, SportsSection, extract_sports_data

__all__ = [
    "SportsByGender",
    "SportsSection",
    "extract_sports_data",
    "normalize_rankings",
    "slugify_label",
]
