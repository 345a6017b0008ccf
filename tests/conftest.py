"""Shared fixtures for chronofmt tests."""

from __future__ import annotations

import os

import pytest

from chronofmt.calendar import GregorianCalendar
from chronofmt.compiler import get_pattern_cache
from chronofmt.config import reset_config
from chronofmt.fields import RenderContext
from chronofmt.formatter import DateTimeFormatter
from chronofmt.locale_data import LocaleFormatTable, get_locale_table, get_registry
from chronofmt.match import get_candidate_cache


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Isolate tests from CHRONOFMT_* variables and shared caches."""
    for key in list(os.environ):
        if key.startswith("CHRONOFMT_"):
            monkeypatch.delenv(key)
    reset_config()
    get_candidate_cache().clear()
    get_pattern_cache().clear()
    yield
    reset_config()
    get_registry().clear()
    get_candidate_cache().clear()


@pytest.fixture
def en_table() -> LocaleFormatTable:
    return get_locale_table("en")


@pytest.fixture
def fr_table() -> LocaleFormatTable:
    return get_locale_table("fr")


@pytest.fixture
def en() -> DateTimeFormatter:
    return DateTimeFormatter("en")


@pytest.fixture
def fr() -> DateTimeFormatter:
    return DateTimeFormatter("fr")


@pytest.fixture
def en_context(en_table: LocaleFormatTable) -> RenderContext:
    return RenderContext(en_table, GregorianCalendar())
