# tests/conftest.py
"""Shared test fixtures.

- CollectingPageOutput: a PageOutput that records every call, standing in
  for the downstream consumer of a filter.
- Schemas and pages for the standard three-column example
  (id: long, name: string, score: double).

Hypothesis Configuration:
- "ci" profile: 100 examples - default
- "nightly" profile: 1000 examples
- "debug" profile: 10 examples with verbose output

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from typing import Any

import pytest
from hypothesis import Verbosity, settings

from colsieve.contracts import Page, Schema
from colsieve.core.pages import BufferAllocator

settings.register_profile("ci", max_examples=100)
settings.register_profile("nightly", max_examples=1000)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "ci"))


class CollectingPageOutput:
    """PageOutput that keeps every page and counts lifecycle calls."""

    def __init__(self) -> None:
        self.pages: list[Page] = []
        self.finish_calls = 0
        self.close_calls = 0

    def add(self, page: Page) -> None:
        if self.close_calls:
            raise AssertionError("add() after close()")
        self.pages.append(page)

    def finish(self) -> None:
        self.finish_calls += 1

    def close(self) -> None:
        self.close_calls += 1

    @property
    def records(self) -> list[tuple[Any, ...]]:
        return [record for page in self.pages for record in page.records]


@pytest.fixture
def collecting_output() -> CollectingPageOutput:
    return CollectingPageOutput()


@pytest.fixture
def allocator() -> BufferAllocator:
    return BufferAllocator(page_size=2)


@pytest.fixture
def scores_schema() -> Schema:
    """id: long, name: string, score: double"""
    return Schema.from_specs(["id: int", "name: text", "score: double"])


@pytest.fixture
def scores_page() -> Page:
    return Page.of(
        (1, "x", 2.5),
        (2, None, 3.0),
        (3, "z", None),
    )
