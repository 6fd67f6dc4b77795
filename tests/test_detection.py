"""Tests for restore_sites.detection -- per-platform browser probes."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from restore_sites.detection import (
    LinuxDetector,
    MacDetector,
    WindowsDetector,
    detector_for_platform,
)
from restore_sites.models import CHROME, EDGE, FIREFOX, SAFARI, BrowserFamily, BrowserKind

_WHICH = "restore_sites.detection.shutil.which"


class TestCustomPath:
    @pytest.mark.parametrize("cls", [MacDetector, WindowsDetector, LinuxDetector])
    def test_existing_path(self, cls, tmp_path):
        exe = tmp_path / "brave"
        exe.write_text("")
        assert cls().detect(BrowserKind.custom(str(exe))) is True

    @pytest.mark.parametrize("cls", [MacDetector, WindowsDetector, LinuxDetector])
    def test_missing_path(self, cls, tmp_path):
        assert cls().detect(BrowserKind.custom(str(tmp_path / "nope"))) is False


class TestSafari:
    @pytest.mark.parametrize("cls", [WindowsDetector, LinuxDetector])
    def test_never_detected_off_macos(self, cls):
        with patch(_WHICH, return_value="/usr/bin/safari"):
            assert cls().detect(SAFARI) is False

    def test_macos_checks_app_bundle(self, tmp_path):
        app = tmp_path / "Safari.app"
        app.mkdir()

        class Probe(MacDetector):
            PATHS = {BrowserFamily.SAFARI: (str(app),)}

        assert Probe().detect(SAFARI) is True


class TestLinux:
    def test_found_on_path(self):
        with patch(_WHICH, side_effect=lambda exe: "/usr/bin/firefox" if exe == "firefox" else None):
            assert LinuxDetector().detect(FIREFOX) is True

    def test_falls_back_to_known_paths(self, tmp_path):
        chrome = tmp_path / "chrome"
        chrome.write_text("")

        class Probe(LinuxDetector):
            PATHS = {BrowserFamily.CHROME: (str(tmp_path / "missing"), str(chrome))}

        with patch(_WHICH, return_value=None):
            assert Probe().detect(CHROME) is True

    def test_not_installed(self):
        class Probe(LinuxDetector):
            PATHS = {}

        with patch(_WHICH, return_value=None):
            assert Probe().detect(EDGE) is False


class TestWindows:
    def test_does_not_consult_path(self):
        class Probe(WindowsDetector):
            PATHS = {}

        with patch(_WHICH, return_value="C:/chrome.exe") as which:
            assert Probe().detect(CHROME) is False
        which.assert_not_called()


class TestDetectorForPlatform:
    @pytest.mark.parametrize(
        ("platform", "cls"),
        [("macos", MacDetector), ("windows", WindowsDetector), ("linux", LinuxDetector)],
    )
    def test_mapping(self, platform, cls):
        assert isinstance(detector_for_platform(platform), cls)

    def test_unknown_platform(self):
        with pytest.raises(ValueError):
            detector_for_platform("beos")
