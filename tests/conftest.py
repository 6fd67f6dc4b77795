"""Shared test fixtures for the restore-sites test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from restore_sites.models import CHROME, BrowserKind, SiteEntry
from restore_sites.persistence import DatabaseStore, ProfileRegistry


class FakeDetector:
    """Detector answering from a fixed set of installed browsers."""

    def __init__(self, installed: set[BrowserKind] | None = None) -> None:
        self.installed = set(installed or ())
        self.calls: list[BrowserKind] = []

    def detect(self, kind: BrowserKind) -> bool:
        self.calls.append(kind)
        return kind in self.installed


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.restore-sites."""
    home = tmp_path / "restore-home"
    monkeypatch.setenv("RESTORE_SITES_HOME", str(home))
    return home


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "db.json"


@pytest.fixture
def store(db_path: Path) -> DatabaseStore:
    return DatabaseStore(db_path)


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector({CHROME})


@pytest.fixture
def registry(store: DatabaseStore, detector: FakeDetector) -> ProfileRegistry:
    return ProfileRegistry(store, detector)


@pytest.fixture
def sites() -> list[SiteEntry]:
    return [
        SiteEntry("Example", "https://example.com"),
        SiteEntry("Python", "https://www.python.org/doc/"),
        SiteEntry("Search", "https://duckduckgo.com/?q=tabs"),
    ]

