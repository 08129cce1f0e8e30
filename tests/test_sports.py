"""Tests for the athletics table sub-extractor."""

from __future__ import annotations

from bs4 import BeautifulSoup

from campusparser.extractors.sports import (
    NOT_AVAILABLE,
    extract_sports_data,
    parse_sports_table,
    read_indicator,
)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _tabular(test_id: str, rows: list[tuple[str, str, str]]) -> str:
    body = "".join(
        f"<tr class='TableTabular__TableRow-impg-1'><td>{name}</td><td></td>"
        f"<td><svg><title>{men}</title></svg></td><td></td>"
        f"<td><svg><title>{women}</title></svg></td></tr>"
        for name, men, women in rows
    )
    return (
        f"<div data-test-id='{test_id}' class='Table__TabularContainer-k11szb-1'>"
        f"<table><tbody>{body}</tbody></table></div>"
    )


class TestReadIndicator:
    def test_title_yes_no(self) -> None:
        cell = _soup("<table><tr><td><svg><title>Yes</title></svg></td></tr></table>").td
        assert read_indicator(cell) is True
        cell = _soup("<table><tr><td><svg><title>No</title></svg></td></tr></table>").td
        assert read_indicator(cell) is False

    def test_icon_reference_fallback(self) -> None:
        """Without a title, the check or cross icon reference decides Yes/No."""
        cell = _soup("<table><tr><td><svg><use xlink:href='#check-pro'></use></svg></td></tr></table>").td
        assert read_indicator(cell) is True
        cell = _soup("<table><tr><td><svg><use xlink:href='#x-con'></use></svg></td></tr></table>").td
        assert read_indicator(cell) is False

    def test_missing_cell(self) -> None:
        assert read_indicator(None) is False


class TestLayouts:
    def test_tabular_dedup(self) -> None:
        html = _tabular("v_ncaa_sports", [
            ("Soccer", "Yes", "No"),
            ("Soccer", "Yes", "No"),
            ("Tennis", "No", "Yes"),
        ])
        result = parse_sports_table(_soup(html), "v_ncaa_sports")
        assert result.men == ["Soccer"]
        assert result.women == ["Tennis"]

    def test_tabular_preferred_over_stacked(self) -> None:
        """When both layouts are rendered only the tabular one is read."""
        stacked = (
            "<div data-test-id='v_club_sports' class='Table__StackedContainer-k11szb-0'>"
            "<table><tbody><tr><td><table><tbody>"
            "<tr><td>h</td></tr><tr><td class='header'>Polo</td></tr>"
            "<tr><td><svg><title>Yes</title></svg></td></tr>"
            "<tr><td><svg><title>Yes</title></svg></td></tr>"
            "</tbody></table></td></tr></tbody></table></div>"
        )
        tabular = _tabular("v_club_sports", [("Sailing", "Yes", "Yes")])
        result = parse_sports_table(_soup(stacked + tabular), "v_club_sports")
        assert result.men == ["Sailing"]

    def test_absent_table(self) -> None:
        result = parse_sports_table(_soup("<p>none</p>"), "v_intr_sports")
        assert result.as_dict() == {"men": [], "women": []}


class TestScholarshipSentinel:
    def test_lowercase_na_ignores_table_markup(self) -> None:
        """A lowercase "n/a" scholarship indicator wins over any table below it."""
        html = "<div data-test-id='v_schol_sports'>n/a</div>" + _tabular(
            "v_schol_sports", [("Golf", "Yes", "Yes")],
        )
        # The first marker element carries the indicator text.
        assert extract_sports_data(_soup(html)).scholarship == NOT_AVAILABLE

    def test_empty_indicator(self) -> None:
        html = "<div data-test-id='v_schol_sports'>  </div>"
        assert extract_sports_data(_soup(html)).scholarship == NOT_AVAILABLE

    def test_missing_indicator(self) -> None:
        assert extract_sports_data(_soup("<p></p>")).scholarship == NOT_AVAILABLE

    def test_table_present(self) -> None:
        html = _tabular("v_schol_sports", [("Golf", "Yes", "No")])
        section = extract_sports_data(_soup(html))
        assert section.as_dict()["scholarshipSports"] == {"men": ["Golf"], "women": []}
