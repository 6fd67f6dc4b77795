"""Tests for restore_sites.orchestrator -- the restore loop."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from restore_sites.errors import ParseError
from restore_sites.models import (
    CHROME,
    FIREFOX,
    BrowserMode,
    CollectionConfig,
    ResolvedConfig,
    SiteEntry,
)
from restore_sites.orchestrator import LAUNCH_DELAY, RestoreOrchestrator


class _FixedResolver:
    def __init__(self, resolved: ResolvedConfig) -> None:
        self.resolved = resolved
        self.calls: list[CollectionConfig] = []

    def resolve(self, config: CollectionConfig) -> ResolvedConfig:
        self.calls.append(config)
        return self.resolved


def _orchestrator(spawn=None, resolved=None, platform="linux"):
    resolver = _FixedResolver(resolved or ResolvedConfig(FIREFOX, BrowserMode.PRIVATE))
    sleep = MagicMock()
    orch = RestoreOrchestrator(
        resolver, spawn=spawn or MagicMock(), sleep=sleep, platform=platform
    )
    return orch, resolver, sleep


def _urls(spawn: MagicMock) -> list[str]:
    return [call.args[0][-1] for call in spawn.call_args_list]


class TestRestore:
    def test_opens_every_site_in_order(self, sites):
        spawn = MagicMock()
        orch, _, _ = _orchestrator(spawn)
        orch.restore(sites)
        assert _urls(spawn) == [s.url for s in sites]

    def test_uses_resolved_browser_and_flag(self, sites):
        spawn = MagicMock()
        orch, _, _ = _orchestrator(spawn)
        orch.restore(sites[:1])
        assert spawn.call_args.args[0] == ["firefox", "--private-window", sites[0].url]

    def test_resolves_once(self, sites):
        orch, resolver, _ = _orchestrator()
        config = CollectionConfig(browser_profile_id="p1")
        orch.restore(sites, config)
        assert resolver.calls == [config]

    def test_missing_config_resolved_as_empty(self, sites):
        orch, resolver, _ = _orchestrator()
        orch.restore(sites)
        assert resolver.calls == [CollectionConfig()]

    def test_delay_between_launches_only(self, sites):
        orch, _, sleep = _orchestrator()
        orch.restore(sites)
        assert sleep.call_count == len(sites) - 1
        sleep.assert_called_with(LAUNCH_DELAY)

    def test_single_site_no_delay(self, sites):
        orch, _, sleep = _orchestrator()
        orch.restore(sites[:1])
        sleep.assert_not_called()

    def test_empty_collection(self):
        spawn = MagicMock()
        orch, _, sleep = _orchestrator(spawn)
        assert orch.restore([]) is None
        spawn.assert_not_called()
        sleep.assert_not_called()

    def test_macos_command(self, sites):
        spawn = MagicMock()
        orch, _, _ = _orchestrator(
            spawn, ResolvedConfig(CHROME, BrowserMode.INCOGNITO), platform="macos"
        )
        orch.restore(sites[:1])
        assert spawn.call_args.args[0][:5] == [
            "open",
            "-na",
            "Google Chrome",
            "--args",
            "--incognito",
        ]


class TestPartialFailure:
    def test_second_site_fails_others_still_opened(self, sites, caplog):
        spawn = MagicMock(side_effect=[None, FileNotFoundError("firefox"), None])
        orch, _, _ = _orchestrator(spawn)

        with caplog.at_level(logging.WARNING, logger="restore_sites"):
            result = orch.restore(sites)

        assert result is None
        assert _urls(spawn) == [s.url for s in sites]
        assert sites[1].url in caplog.text

    def test_switch_like_url_is_skipped(self, sites, caplog):
        spawn = MagicMock()
        orch, _, _ = _orchestrator(spawn)
        hostile = SiteEntry("evil", "--renderer-cmd-prefix=calc")

        with caplog.at_level(logging.WARNING, logger="restore_sites"):
            orch.restore([sites[0], hostile, sites[2]])

        assert _urls(spawn) == [sites[0].url, sites[2].url]
        assert "--renderer-cmd-prefix=calc" in caplog.text

    def test_all_sites_fail_still_succeeds(self, sites):
        spawn = MagicMock(side_effect=OSError("boom"))
        orch, _, sleep = _orchestrator(spawn)
        orch.restore(sites)
        assert spawn.call_count == len(sites)
        assert sleep.call_count == len(sites) - 1

    def test_resolution_failure_propagates(self, sites):
        resolver = MagicMock()
        resolver.resolve.side_effect = ParseError("bad document")
        spawn = MagicMock()
        orch = RestoreOrchestrator(resolver, spawn=spawn, sleep=MagicMock())
        with pytest.raises(ParseError):
            orch.restore(sites)
        spawn.assert_not_called()


class TestWithRegistry:
    def test_fallback_uses_chrome_in_default_mode(self, registry, sites):
        from restore_sites.resolver import ConfigResolver

        spawn = MagicMock()
        orch = RestoreOrchestrator(
            ConfigResolver(registry), spawn=spawn, sleep=MagicMock(), platform="linux"
        )
        orch.restore(sites[:1])
        assert spawn.call_args.args[0] == [
            "/opt/google/chrome/chrome",
            "--incognito",
            sites[0].url,
        ]
