"""User preferences for restore-sites.

Loads settings from ~/.restore-sites/preferences.yaml.
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .log import logger
from .orchestrator import LAUNCH_DELAY
from .platform import preferences_path, restore_sites_home

_DEFAULT_YAML = """\
# restore-sites preferences
# Delete this file to reset to defaults.

storage:
  data_dir: ""                   # where db.json lives (empty = ~/.restore-sites)

restore:
  launch_delay: 0.5              # seconds to wait between opening two sites

logging:
  level: WARNING                 # DEBUG, INFO, WARNING or ERROR
"""


@dataclass
class Preferences:
    """Top-level preferences."""

    data_dir: Path = field(default_factory=restore_sites_home)
    launch_delay: float = LAUNCH_DELAY
    log_level: str = "WARNING"


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or preferences_path()
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except (OSError, yaml.YAMLError):
            logger.warning("Ignoring unreadable preferences file %s", path, exc_info=True)
            return prefs
        if not isinstance(data, dict):
            return prefs
        storage = data.get("storage")
        if isinstance(storage, dict) and storage.get("data_dir"):
            prefs.data_dir = Path(str(storage["data_dir"])).expanduser()
        restore = data.get("restore")
        if isinstance(restore, dict) and "launch_delay" in restore:
            try:
                prefs.launch_delay = max(0.0, float(restore["launch_delay"]))
            except (TypeError, ValueError):
                logger.warning("Invalid launch_delay %r", restore["launch_delay"])
        logging_section = data.get("logging")
        if isinstance(logging_section, dict) and "level" in logging_section:
            level = str(logging_section["level"]).upper()
            if isinstance(logging.getLevelName(level), int):
                prefs.log_level = level
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("Could not write default preferences to %s", path, exc_info=True)

    return prefs
