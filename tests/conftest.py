"""
Shared test fixtures.

Provides the canonical A-1 / A-2 target and A-1 / A-3 raw tables so each
test module only states the rows it cares about.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

from rawsync.domain.job_spec import JobSpec  # noqa: E402
from rawsync.infrastructure.memory_storage import InMemoryStorage  # noqa: E402
from tests.shared.builders import SOURCE_HEADER, TARGET_HEADER, make_job  # noqa: E402


@pytest.fixture
def simple_job() -> JobSpec:
    return make_job()


@pytest.fixture
def storage() -> InMemoryStorage:
    """
    Target rows A-1 / A-2 ("old"), raw rows A-1 / A-3 ("new").
    """
    s = InMemoryStorage()
    s.add_table(
        "Target",
        TARGET_HEADER,
        [["A-1", "old", "Yes"], ["A-2", "old", "Yes"]],
    )
    s.add_table(
        "RAW Target",
        SOURCE_HEADER,
        [["A-1", "new", "x"], ["A-3", "new", "y"]],
    )
    return s
