"""Shared pytest fixtures for tagsmith tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from tagsmith.core import TagStore
from tests._store_factory import make_store


@pytest.fixture
def store(tmp_path: Path) -> Generator[TagStore, None, None]:
    """Fresh TagStore for each test, resolving paths against tmp_path."""
    s = make_store(tmp_path)
    yield s
    s.close()


@pytest.fixture(autouse=True)
def _no_db_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's TAGSMITH_DB from leaking into discovery tests."""
    monkeypatch.delenv("TAGSMITH_DB", raising=False)


@pytest.fixture
def tagsmith_project(tmp_path: Path) -> Path:
    """A tmp directory set up as a tagsmith project (.tagsmith/ with config + db).

    Returns the project root (parent of .tagsmith/).
    """
    make_store(tmp_path, project=True).close()
    return tmp_path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()
