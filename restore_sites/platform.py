"""Cross-platform abstractions for restore-sites.

Detects the runtime platform once at import time and provides
platform-appropriate paths. Every other module imports from here instead
of doing its own platform detection.

Supported platforms:
  - linux   (native Linux, WSL included)
  - macos   (macOS / Darwin)
  - windows (native Windows)
"""

from __future__ import annotations

import os
import platform
from pathlib import Path

# ---------------------------------------------------------------------------
# Platform detection (runs once at import time)
# ---------------------------------------------------------------------------

_system = platform.system()  # "Linux", "Darwin", "Windows"

IS_WINDOWS = _system == "Windows"
IS_MACOS = _system == "Darwin"
IS_LINUX = not (IS_WINDOWS or IS_MACOS)

if IS_WINDOWS:
    PLATFORM = "windows"
elif IS_MACOS:
    PLATFORM = "macos"
else:
    PLATFORM = "linux"

PLATFORMS = ("macos", "windows", "linux")

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

APP_DIR_NAME = ".restore-sites"
DB_FILE_NAME = "db.json"
PREFS_FILE_NAME = "preferences.yaml"


def restore_sites_home() -> Path:
    """Return the data directory, ``~/.restore-sites`` unless overridden.

    ``$RESTORE_SITES_HOME`` wins when set, which keeps tests and
    throwaway runs away from the real database.
    """
    override = os.environ.get("RESTORE_SITES_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / APP_DIR_NAME


def database_path(data_dir: Path | None = None) -> Path:
    """Return ``<data_dir>/db.json``."""
    return (data_dir or restore_sites_home()) / DB_FILE_NAME


def preferences_path() -> Path:
    """Return ``<data_dir>/preferences.yaml``."""
    return restore_sites_home() / PREFS_FILE_NAME


# ---------------------------------------------------------------------------
# Path display helpers
# ---------------------------------------------------------------------------


def abbreviate_home(path_str: str) -> str:
    """Replace the user's home directory prefix with ``~``."""
    home = str(Path.home())
    if path_str.startswith(home):
        return "~" + path_str[len(home) :]
    return path_str
