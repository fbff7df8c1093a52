"""Shared pytest fixtures for LAMP tests."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def programs_dir(fixtures_dir: Path) -> Path:
    """Return path to sample LAMP programs."""
    return fixtures_dir / "programs"


@pytest.fixture
def conditional_program(programs_dir: Path) -> Path:
    """Return path to conditional.lamp fixture."""
    return programs_dir / "conditional.lamp"
