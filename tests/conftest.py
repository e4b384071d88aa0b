"""Shared test fixtures for ptdiff."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from _builders import BLOCK_SCHEMA
from ptdiff.schema import SchemaType
from ptdiff.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from PTDIFF_* variables and the settings cache."""
    for name in (
        "PTDIFF_OVERFLOW_POLICY",
        "PTDIFF_CLEANUP",
        "PTDIFF_DIFF_TIMEOUT",
        "PTDIFF_DIFF_EDIT_COST",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def block_schema() -> SchemaType:
    return SchemaType.model_validate(BLOCK_SCHEMA)
