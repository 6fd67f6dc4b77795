"""Persistence layer – the ``db.json`` document and its profile table."""

from .database import DatabaseStore
from .profiles import ProfileRegistry

__all__ = [
    "DatabaseStore",
    "ProfileRegistry",
]
