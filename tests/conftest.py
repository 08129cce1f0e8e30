"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from campusparser.config import ExtractionConfig, load_config

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def student_life_html() -> str:
    return _read_fixture("student_life.html")


@pytest.fixture
def academics_html() -> str:
    return _read_fixture("academics.html")


@pytest.fixture
def applying_html() -> str:
    return _read_fixture("applying.html")


@pytest.fixture
def rankings_html() -> str:
    return _read_fixture("overall_rankings.html")


@pytest.fixture
def config_path() -> Path:
    return FIXTURES_DIR / "extraction-config.json"


@pytest.fixture
def config(config_path: Path) -> ExtractionConfig:
    return load_config(config_path)
