"""restore-sites: save named collections of browser tabs and reopen them later."""

from .models import (
    BrowserFamily,
    BrowserKind,
    BrowserMode,
    BrowserProfile,
    CollectionConfig,
    CollectionRecord,
    Database,
    ResolvedConfig,
    SiteEntry,
)
from .services import CollectionService, RestoreSites

__version__ = "0.3.0"

__all__ = [
    "BrowserFamily",
    "BrowserKind",
    "BrowserMode",
    "BrowserProfile",
    "CollectionConfig",
    "CollectionRecord",
    "CollectionService",
    "Database",
    "ResolvedConfig",
    "RestoreSites",
    "SiteEntry",
]
