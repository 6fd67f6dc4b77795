"""Base JSON persistence store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..errors import ParseError, StoreIOError
from ..log import logger


def dumps(data: Any) -> str:
    """Pretty-printed JSON text, the exact form written to disk."""
    return json.dumps(data, indent=2, ensure_ascii=False)


class JsonStore:
    """JSON file store with atomic write.

    Unlike a cache file, the document is the sole source of truth, so a
    corrupt file is reported as :class:`ParseError` instead of being
    replaced by ``_default()``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # -- core I/O -------------------------------------------------------------

    def load_raw(self) -> Any:
        """Read and parse the JSON file; ``_default()`` when it is absent."""
        if not self.path.exists():
            logger.info("Database file %s not found, starting empty", self.path)
            return self._default()
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreIOError(f"Failed to read {self.path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ParseError(f"{self.path} is not UTF-8 text: {exc}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Malformed JSON in {self.path}: {exc}") from exc

    def save_raw(self, data: Any) -> None:
        """Write *data* as pretty-printed JSON, creating parents as needed.

        The text goes to a temporary sibling first and is then renamed over
        the target, so readers never see a half-written file.
        """
        text = dumps(data)
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreIOError(f"Failed to write {self.path}: {exc}") from exc

    # -- override point -------------------------------------------------------

    def _default(self) -> Any:  # noqa: PLR6301
        """Return the empty-state value for this store (dict by default)."""
        return {}
