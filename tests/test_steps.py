"""Tests for the step interpreter."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from campusparser.errors import ConfigError
from campusparser.steps import StepAction, apply_steps, parse_step

_HTML = """
<html><body>
  <div class="card"><span class="k">GPA:</span>   <span class="v">3.5</span></div>
  <div class="card"><span class="k">Tuition</span><span class="v">$50,000</span></div>
  <div class="outer"><div class="inner"><b>x</b></div></div>
</body></html>
"""


@pytest.fixture
def soup() -> BeautifulSoup:
    return BeautifulSoup(_HTML, "lxml")


class TestParseStep:
    def test_get_and_find_alias(self) -> None:
        assert parse_step("get:div").action is StepAction.GET
        assert parse_step("find:div").action is StepAction.GET

    def test_action_case_insensitive(self) -> None:
        assert parse_step("HAVETEXT:GPA").action is StepAction.HAVE_TEXT
        assert parse_step("Get:div").action is StepAction.GET

    def test_argument_keeps_later_colons(self) -> None:
        step = parse_step("get:li:first-child")
        assert step.argument == "li:first-child"

    def test_missing_separator(self) -> None:
        with pytest.raises(ConfigError, match="get div"):
            parse_step("get div")

    def test_unknown_action(self) -> None:
        with pytest.raises(ConfigError, match="select:div") as exc_info:
            parse_step("select:div")
        assert exc_info.value.step == "select:div"

    def test_empty_argument(self) -> None:
        with pytest.raises(ConfigError, match="missing argument"):
            parse_step("haveText:   ")

    def test_invalid_selector(self) -> None:
        """Selectors are compiled while parsing, before any document is seen."""
        with pytest.raises(ConfigError) as exc_info:
            parse_step("get:div[[[")
        assert exc_info.value.step == "get:div[[["

    def test_have_text_argument_is_not_a_selector(self) -> None:
        assert parse_step("haveText:[[[").argument == "[[["


class TestApplySteps:
    def test_get_collects_descendants(self, soup: BeautifulSoup) -> None:
        found = apply_steps(soup, ["get:div.card", "get:span.v"])
        assert [n.get_text() for n in found] == ["3.5", "$50,000"]

    def test_have_text_is_whitespace_insensitive(self, soup: BeautifulSoup) -> None:
        found = apply_steps(soup, ["get:div.card", "haveText:GPA: 3.5"])
        assert len(found) == 1
        assert "Tuition" not in found[0].get_text()

    def test_have_text_is_case_sensitive(self, soup: BeautifulSoup) -> None:
        assert apply_steps(soup, ["get:div.card", "haveText:gpa"]) == []

    def test_no_match_is_absorbing(self, soup: BeautifulSoup) -> None:
        assert apply_steps(soup, ["get:table", "get:div"]) == []
        assert apply_steps(soup, ["get:div.card", "haveText:Nope", "get:span"]) == []

    def test_empty_steps_return_scope(self, soup: BeautifulSoup) -> None:
        assert apply_steps(soup, []) == [soup]

    def test_nested_get_does_not_deduplicate(self, soup: BeautifulSoup) -> None:
        """An element reachable from two candidates is returned twice."""
        found = apply_steps(soup, ["get:div", "get:b"])
        # <b> sits under both div.outer and div.inner
        assert len(found) == 2
        assert found[0] is found[1]

    def test_invalid_selector_is_config_error(self, soup: BeautifulSoup) -> None:
        with pytest.raises(ConfigError):
            apply_steps(soup, ["get:div[[["])

    def test_malformed_later_step_fails_even_without_match(self, soup: BeautifulSoup) -> None:
        """Every step is parsed before the first one runs."""
        with pytest.raises(ConfigError):
            apply_steps(soup, ["get:table", "bogus"])
