"""Operations exposed to a presentation layer.

``RestoreSites`` wires the store, profile registry, resolver and
orchestrator together for one data directory. The collection-level
behaviour (default names, keeping ``created_at`` on update, export to a
user-chosen file) lives in :class:`CollectionService`.
"""

from __future__ import annotations

import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from .detection import BrowserDetector
from .errors import NotFoundError, StoreIOError
from .launcher import Spawner
from .log import logger
from .models import CollectionConfig, CollectionRecord, SiteEntry, utc_now
from .orchestrator import LAUNCH_DELAY, RestoreOrchestrator
from .persistence import DatabaseStore, ProfileRegistry
from .platform import database_path
from .resolver import ConfigResolver

PathChooser = Callable[[str], "Path | str | None"]


def backup_filename(now: datetime | None = None) -> str:
    """``restore-sites-backup-<timestamp>.json``."""
    stamp = (now or utc_now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"restore-sites-backup-{stamp}.json"


class CollectionService:
    def __init__(self, store: DatabaseStore) -> None:
        self.store = store

    def save_collection(
        self,
        sites: Iterable[SiteEntry],
        name: str | None = None,
        config: CollectionConfig | None = None,
    ) -> CollectionRecord:
        """Store a new collection; unnamed ones are called ``Collection <ts>``."""
        now = utc_now()
        record = CollectionRecord(
            name=name or f"Collection {int(now.timestamp())}",
            sites=list(sites),
            config=config or CollectionConfig(),
            created_at=now,
            updated_at=now,
        )
        saved = self.store.insert(record)
        logger.info("Collection saved with ID: %d", saved.id)
        return saved

    def load_all_collections(self) -> list[CollectionRecord]:
        return self.store.get_all()

    def get_collection(self, collection_id: int) -> CollectionRecord | None:
        return self.store.get_by_id(collection_id)

    def search_collections(self, query: str) -> list[CollectionRecord]:
        return self.store.search_by_name(query)

    def update_collection(
        self,
        collection_id: int,
        sites: Iterable[SiteEntry],
        name: str | None = None,
        config: CollectionConfig | None = None,
    ) -> CollectionRecord:
        """Replace sites/config of a collection, keeping its creation time.

        The existing name is kept when *name* is not given.
        """
        existing = self.store.get_by_id(collection_id)
        if existing is None:
            raise NotFoundError(f"Collection with id {collection_id} not found")
        return self.store.update(
            existing.copy(
                name=name or existing.name,
                sites=list(sites),
                config=config if config is not None else existing.config,
            )
        )

    def delete_collection(self, collection_id: int) -> bool:
        return self.store.delete_by_id(collection_id)

    # -- backup ---------------------------------------------------------------

    def export_database(self) -> str:
        return self.store.export_to_json()

    def import_database(self, text: str, replace_existing: bool) -> int:
        return self.store.import_from_json(text, replace_existing)

    def export_database_to_file(self, choose_path: PathChooser) -> Path | None:
        """Write the export to a path picked by *choose_path*.

        *choose_path* gets a suggested file name and returns the destination,
        or ``None`` when the user cancels; cancellation returns ``None``.
        """
        text = self.export_database()
        chosen = choose_path(backup_filename())
        if chosen is None:
            logger.info("Export cancelled by user")
            return None
        path = Path(chosen)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise StoreIOError(f"Failed to write {path}: {exc}") from exc
        logger.info("Database exported successfully to: %s", path)
        return path


class RestoreSites:
    """Everything one data directory offers, ready for a UI or the CLI."""

    def __init__(
        self,
        data_dir: Path | None = None,
        *,
        detector: BrowserDetector | None = None,
        spawn: Spawner = subprocess.Popen,
        sleep: Callable[[float], None] = time.sleep,
        launch_delay: float = LAUNCH_DELAY,
    ) -> None:
        self.store = DatabaseStore(database_path(data_dir))
        self.collections = CollectionService(self.store)
        self.profiles = ProfileRegistry(self.store, detector)
        self.resolver = ConfigResolver(self.profiles)
        self.orchestrator = RestoreOrchestrator(
            self.resolver, spawn=spawn, sleep=sleep, delay=launch_delay
        )

    def restore(
        self, sites: Iterable[SiteEntry], config: CollectionConfig | None = None
    ) -> None:
        self.orchestrator.restore(sites, config)

    def restore_collection(self, collection_id: int) -> CollectionRecord:
        """Open every site of a stored collection with its own config."""
        record = self.collections.get_collection(collection_id)
        if record is None:
            raise NotFoundError(f"Collection with id {collection_id} not found")
        self.restore(record.sites, record.config)
        return record
