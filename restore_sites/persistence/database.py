"""Collection record store backed by a single JSON document.

Every operation loads the whole document, modifies it and writes it back.
There is no in-memory cache and no lock: the file is the only source of
truth and the last writer wins.
"""

from __future__ import annotations

import json

from ..errors import NotFoundError, ParseError
from ..log import logger
from ..models import CollectionRecord, Database, utc_now
from ._base import JsonStore, dumps


class DatabaseStore(JsonStore):
    """The ``db.json`` document (``{meta, profiles, data}``)."""

    def _default(self) -> None:  # noqa: PLR6301
        return None

    # -- document -------------------------------------------------------------

    def load(self) -> Database:
        """Load the document; a missing file yields a fresh empty database."""
        raw = self.load_raw()
        if raw is None:
            return Database()
        database = Database.from_dict(raw)
        logger.debug("Loaded database with %d records", len(database.data))
        return database

    def save(self, database: Database) -> None:
        """Overwrite the document with *database*."""
        self.save_raw(database.to_dict())
        logger.info("Saved database with %d records", len(database.data))

    # -- records --------------------------------------------------------------

    def insert(self, record: CollectionRecord) -> CollectionRecord:
        """Store *record* under a freshly allocated id and return the copy."""
        database = self.load()
        database.meta.max_id += 1
        stored = record.copy(id=database.meta.max_id, updated_at=utc_now())

        database.data.append(stored)
        database.meta.record_count = len(database.data)
        database.meta.last_updated = utc_now()
        database.meta.last_updated_id = stored.id

        self.save(database)
        logger.info("Inserted new record with ID: %d", stored.id)
        return stored

    def get_all(self) -> list[CollectionRecord]:
        return self.load().data

    def get_by_id(self, record_id: int) -> CollectionRecord | None:
        return next((r for r in self.load().data if r.id == record_id), None)

    def search_by_name(self, query: str) -> list[CollectionRecord]:
        """Records whose name contains *query*, ignoring case."""
        needle = query.lower()
        results = [r for r in self.load().data if needle in r.name.lower()]
        logger.debug("Search for %r returned %d results", query, len(results))
        return results

    def update(self, record: CollectionRecord) -> CollectionRecord:
        """Replace the stored record with the same id, keeping its position.

        ``updated_at`` is always refreshed. Raises :class:`NotFoundError`
        when no record has that id.
        """
        database = self.load()
        for index, existing in enumerate(database.data):
            if existing.id == record.id:
                stored = record.copy(updated_at=utc_now())
                database.data[index] = stored
                break
        else:
            raise NotFoundError(f"Record with ID {record.id} not found for update")

        database.meta.last_updated = utc_now()
        database.meta.last_updated_id = stored.id
        self.save(database)
        logger.info("Updated record with ID: %d", stored.id)
        return stored

    def delete_by_id(self, record_id: int) -> bool:
        """Remove the record with *record_id*. Return ``False`` if absent."""
        database = self.load()
        remaining = [r for r in database.data if r.id != record_id]
        if len(remaining) == len(database.data):
            logger.warning("Record with ID %d not found for deletion", record_id)
            return False

        database.data = remaining
        database.meta.record_count = len(remaining)
        database.meta.last_updated = utc_now()
        self.save(database)
        logger.info("Deleted record with ID: %d", record_id)
        return True

    # -- import / export ------------------------------------------------------

    def export_to_json(self) -> str:
        """Serialize the whole document exactly as :meth:`save` writes it."""
        text = dumps(self.load().to_dict())
        logger.info("Exported database to JSON, %d characters", len(text))
        return text

    def import_from_json(self, text: str, replace_existing: bool) -> int:
        """Import a full document and return the number of collections taken.

        With *replace_existing* the stored document is overwritten as-is,
        ids and counters included. Otherwise only collections whose name
        (ignoring case) is not already present are appended, each under a
        new id; profiles are left alone.
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid import data: {exc}") from exc
        incoming = Database.from_dict(raw)

        if replace_existing:
            self.save(incoming)
            logger.info(
                "Replaced entire database with %d collections", len(incoming.data)
            )
            return len(incoming.data)

        database = self.load()
        imported = 0
        for record in incoming.data:
            name = record.name.lower()
            if any(existing.name.lower() == name for existing in database.data):
                logger.warning(
                    "Skipping collection %r - name already exists", record.name
                )
                continue
            database.meta.max_id += 1
            database.data.append(
                record.copy(id=database.meta.max_id, updated_at=utc_now())
            )
            imported += 1

        database.meta.record_count = len(database.data)
        database.meta.last_updated = utc_now()
        database.meta.last_updated_id = database.meta.max_id
        self.save(database)
        logger.info("Merged database, imported %d new collections", imported)
        return imported
