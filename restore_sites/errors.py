"""Exception types raised by the store, registry and launcher."""

from __future__ import annotations


class RestoreSitesError(Exception):
    """Base class for every recoverable restore-sites failure."""


class NotFoundError(RestoreSitesError):
    """A record or profile with the requested id does not exist."""


class AlreadyExistsError(RestoreSitesError):
    """A profile with the same id is already stored."""


class ParseError(RestoreSitesError):
    """Persisted or imported JSON is malformed or does not match the schema."""


class StoreIOError(RestoreSitesError, OSError):
    """Reading or writing the database file failed."""


class LaunchError(RestoreSitesError):
    """Spawning a browser process failed."""


class ValidationError(RestoreSitesError, ValueError):
    """A value failed construction-time validation (e.g. profile name)."""
