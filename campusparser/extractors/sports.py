"""Athletics tables: sports offered, by gender.

The same logical table ships in two DOM layouts, picked per section by the
wrapper class on ``div[data-test-id=...]``:

  tabular  -- one ``tr`` per sport; sport name in column 0, men's indicator
              in column 2, women's in column 4.
  stacked  -- one outer row per sport holding an inner table whose rows are
              header, name, men, women.

Indicator cells hold an SVG icon.  Its ``<title>`` says ``Yes``/``No``; when
the title is missing the ``<use>`` icon reference is checked instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

_TABULAR_CLASS = "Table__TabularContainer-k11szb-1"
_STACKED_CLASS = "Table__StackedContainer-k11szb-0"
_TABULAR_ROW_CLASS = "TableTabular__TableRow-impg-1"

_CHECK_ICON = "check-pro"
_CROSS_ICON = "x-con"

# data-test-id of each section
_SCHOLARSHIP_ID = "v_schol_sports"
_NONSCHOLARSHIP_ID = "v_ncaa_sports"
_CLUB_ID = "v_club_sports"
_INTRAMURAL_ID = "v_intr_sports"


@dataclass
class SportsByGender:
    men: list[str] = field(default_factory=list)
    women: list[str] = field(default_factory=list)

    def add(self, name: str, men: bool, women: bool) -> None:
        if men:
            self.men.append(name)
        if women:
            self.women.append(name)

    def deduplicated(self) -> SportsByGender:
        """Drop repeated names (some pages render rows twice), keeping order."""
        return SportsByGender(
            men=list(dict.fromkeys(self.men)),
            women=list(dict.fromkeys(self.women)),
        )

    def as_dict(self) -> dict[str, list[str]]:
        return {"men": list(self.men), "women": list(self.women)}


@dataclass
class SportsSection:
    scholarship: SportsByGender | str
    nonscholarship: SportsByGender
    club: SportsByGender
    intramural: SportsByGender

    def as_dict(self) -> dict[str, dict[str, list[str]] | str]:
        scholarship = self.scholarship
        return {
            "scholarshipSports": (
                scholarship if isinstance(scholarship, str) else scholarship.as_dict()
            ),
            "nonscholarshipSports": self.nonscholarship.as_dict(),
            "clubSports": self.club.as_dict(),
            "intramuralRecreationalSports": self.intramural.as_dict(),
        }


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

def read_indicator(cell: Tag | None) -> bool:
    """Return True when *cell* shows the "offered" icon."""
    if cell is None:
        return False
    title = cell.find("title")
    if isinstance(title, Tag):
        label = title.get_text().strip()
        if label == "Yes":
            return True
        if label == "No":
            return False
    use = cell.find("use")
    if isinstance(use, Tag):
        href = str(use.get("xlink:href") or use.get("href") or "")
        if _CHECK_ICON in href:
            return True
        if _CROSS_ICON in href:
            return False
    return False


def _nth_cell(row: Tag, index: int) -> Tag | None:
    cells = row.find_all("td")
    return cells[index] if len(cells) > index else None


# ---------------------------------------------------------------------------
# Layout parsers
# ---------------------------------------------------------------------------

def parse_tabular(containers: list[Tag]) -> SportsByGender:
    result = SportsByGender()
    for container in containers:
        for row in container.select(f"table tbody tr.{_TABULAR_ROW_CLASS}"):
            name_cell = _nth_cell(row, 0)
            name = name_cell.get_text().strip() if name_cell else ""
            if not name:
                continue
            result.add(
                name,
                men=read_indicator(_nth_cell(row, 2)),
                women=read_indicator(_nth_cell(row, 4)),
            )
    return result.deduplicated()


def parse_stacked(containers: list[Tag]) -> SportsByGender:
    result = SportsByGender()
    for container in containers:
        for outer in container.select(":scope > table > tbody > tr"):
            inner = outer.select(":scope > td > table > tbody > tr")
            if len(inner) < 4:
                continue
            header = inner[1].select_one(".header")
            name = header.get_text().strip() if header else ""
            if not name:
                continue
            result.add(
                name,
                men=read_indicator(inner[2].find("td")),
                women=read_indicator(inner[3].find("td")),
            )
    return result.deduplicated()


_LAYOUTS: tuple[tuple[str, Callable[[list[Tag]], SportsByGender]], ...] = (
    (_TABULAR_CLASS, parse_tabular),
    (_STACKED_CLASS, parse_stacked),
)


def parse_sports_table(soup: BeautifulSoup | Tag, test_id: str) -> SportsByGender:
    """Probe for the tabular layout first, then stacked."""
    for css_class, parser in _LAYOUTS:
        containers = soup.select(f"div[data-test-id='{test_id}'].{css_class}")
        if containers:
            logger.debug("Sports table %s: %s layout", test_id, parser.__name__)
            return parser(containers)
    logger.debug("Sports table %s not found", test_id)
    return SportsByGender()


def _scholarship_sports(soup: BeautifulSoup | Tag) -> SportsByGender | str:
    marker = soup.select_one(f"[data-test-id='{_SCHOLARSHIP_ID}']")
    value = marker.get_text().strip() if marker else ""
    if not value or value.lower() == NOT_AVAILABLE.lower():
        return NOT_AVAILABLE
    return parse_sports_table(soup, _SCHOLARSHIP_ID)


def extract_sports_data(soup: BeautifulSoup | Tag) -> SportsSection:
    """Parse all four athletics sections from a parsed student-life page."""
    return SportsSection(
        scholarship=_scholarship_sports(soup),
        nonscholarship=parse_sports_table(soup, _NONSCHOLARSHIP_ID),
        club=parse_sports_table(soup, _CLUB_ID),
        intramural=parse_sports_table(soup, _INTRAMURAL_ID),
    )
