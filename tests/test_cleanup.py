"""Tests for array post-passes and object value cleanup."""

from __future__ import annotations

from campusparser.cleanup import (
    ArrayRule,
    ValueRule,
    apply_array_rule,
    array_rule_for,
    clean_object_value,
    strips_time_label,
    value_rule_for,
)


class TestArrayRules:
    def test_rule_selection(self) -> None:
        assert array_rule_for("studentLife.greekLife.undergraduate") is ArrayRule.SPLIT_COMBINED_LABEL
        assert (
            array_rule_for("academics.studentParticipationInSpecialAcademicPrograms")
            is ArrayRule.DROP_PERCENTAGE_ONLY
        )
        assert array_rule_for("campusInfo.campusSafetyServices") is ArrayRule.NONE

    def test_split_combined_label(self) -> None:
        """A label glued to its percentage is split into two entries."""
        items = ["Independent100%", "Fraternities"]
        assert apply_array_rule(ArrayRule.SPLIT_COMBINED_LABEL, items) == [
            "Independent",
            "100%",
            "Fraternities",
        ]

    def test_split_is_idempotent(self) -> None:
        once = apply_array_rule(ArrayRule.SPLIT_COMBINED_LABEL, ["Independent100%"])
        assert apply_array_rule(ArrayRule.SPLIT_COMBINED_LABEL, once) == once

    def test_drop_percentage_only(self) -> None:
        items = ["Honors Program42%", "42%", "Study Abroad"]
        assert apply_array_rule(ArrayRule.DROP_PERCENTAGE_ONLY, items) == [
            "Honors Program42%",
            "Study Abroad",
        ]


class TestObjectRules:
    def test_rule_selection(self) -> None:
        path = "academics.facultyAndClasses.totalFaculty"
        assert value_rule_for(path, "full_time") is ValueRule.NUMBER
        assert strips_time_label(path, "part_time")
        assert not strips_time_label(path, "total")
        assert value_rule_for("studentLife.studentDemographics.GenderDistribution", "male") is ValueRule.PERCENTAGE
        assert value_rule_for("studentLife.housing.studentsRequiredToLiveInSchoolHousing", "x") is ValueRule.YES_NO
        assert value_rule_for("campusInfo.misc", "x") is ValueRule.TEXT

    def test_strip_label_then_number(self) -> None:
        assert clean_object_value("1,250  full time", ValueRule.NUMBER, strip_label=True) == 1250

    def test_strip_label_case_insensitive(self) -> None:
        assert clean_object_value("40 Part Time", ValueRule.TEXT, strip_label=True) == "40"

    def test_number_falls_back_to_text(self) -> None:
        assert clean_object_value("not reported", ValueRule.NUMBER) == "not reported"

    def test_number_is_idempotent(self) -> None:
        """Already-cleaned numbers pass through unchanged."""
        assert clean_object_value(1250, ValueRule.NUMBER, strip_label=True) == 1250

    def test_percentage(self) -> None:
        assert clean_object_value("Male60.7%", ValueRule.PERCENTAGE) == "60.7%"
        assert clean_object_value("60.7%", ValueRule.PERCENTAGE) == "60.7%"
        assert clean_object_value("no figure", ValueRule.PERCENTAGE) == "no figure"

    def test_yes_no(self) -> None:
        assert clean_object_value("First-year StudentsYes", ValueRule.YES_NO) == "Yes"
        assert clean_object_value("Unknown", ValueRule.YES_NO) == "Unknown"

    def test_text_normalises(self) -> None:
        assert clean_object_value("  a\n b ", ValueRule.TEXT) == "a b"
