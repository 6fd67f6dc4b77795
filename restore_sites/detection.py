"""Browser installation probes, one detector per host OS.

Every detector answers ``detect(kind) -> bool``. Known browsers are probed
through well-known install locations (and ``PATH`` on Linux); a
``Custom(path)`` browser is detected when that path exists. Safari is only
ever found on macOS.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

from .log import logger
from .models import BrowserFamily, BrowserKind
from .platform import PLATFORM


class BrowserDetector(Protocol):
    def detect(self, kind: BrowserKind) -> bool: ...


class _PathDetector:
    """Probe a fixed table of candidate paths (and executables on PATH)."""

    PATHS: dict[BrowserFamily, tuple[str, ...]] = {}
    EXECUTABLES: dict[BrowserFamily, tuple[str, ...]] = {}

    def detect(self, kind: BrowserKind) -> bool:
        if kind.is_custom:
            return Path(kind.name or "").exists()
        for exe in self.EXECUTABLES.get(kind.family, ()):
            if shutil.which(exe):
                logger.debug("Detected %s via PATH (%s)", kind, exe)
                return True
        found = any(Path(p).exists() for p in self.PATHS.get(kind.family, ()))
        logger.debug("Detection for %s: %s", kind, found)
        return found


class MacDetector(_PathDetector):
    PATHS = {
        BrowserFamily.CHROME: ("/Applications/Google Chrome.app",),
        BrowserFamily.FIREFOX: ("/Applications/Firefox.app",),
        BrowserFamily.SAFARI: ("/Applications/Safari.app",),
        BrowserFamily.EDGE: ("/Applications/Microsoft Edge.app",),
    }


class WindowsDetector(_PathDetector):
    PATHS = {
        BrowserFamily.CHROME: (
            r"C:\Program Files\Google\Chrome\Application\chrome.exe",
            r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
        ),
        BrowserFamily.FIREFOX: (
            r"C:\Program Files\Mozilla Firefox\firefox.exe",
            r"C:\Program Files (x86)\Mozilla Firefox\firefox.exe",
        ),
        BrowserFamily.EDGE: (
            r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
            r"C:\Program Files\Microsoft\Edge\Application\msedge.exe",
        ),
    }


class LinuxDetector(_PathDetector):
    PATHS = {
        BrowserFamily.CHROME: (
            "/opt/google/chrome/chrome",
            "/usr/bin/google-chrome",
            "/usr/bin/google-chrome-stable",
        ),
        BrowserFamily.FIREFOX: (
            "/usr/bin/firefox",
            "/usr/bin/firefox-esr",
            "/opt/firefox/firefox",
        ),
        BrowserFamily.EDGE: (
            "/usr/bin/microsoft-edge",
            "/usr/bin/microsoft-edge-stable",
        ),
    }
    EXECUTABLES = {
        BrowserFamily.CHROME: ("google-chrome",),
        BrowserFamily.FIREFOX: ("firefox",),
        BrowserFamily.EDGE: ("microsoft-edge",),
    }


_DETECTORS: dict[str, type[_PathDetector]] = {
    "macos": MacDetector,
    "windows": WindowsDetector,
    "linux": LinuxDetector,
}


def detector_for_platform(platform: str = PLATFORM) -> BrowserDetector:
    """Return the detector for *platform* (``macos``, ``windows``, ``linux``)."""
    try:
        return _DETECTORS[platform]()
    except KeyError:
        raise ValueError(f"Unsupported platform: {platform!r}") from None
