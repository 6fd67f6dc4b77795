"""Restore a collection: one browser launch per site."""

from __future__ import annotations

import subprocess
import time
from typing import Callable, Iterable

from .errors import LaunchError
from .launcher import Spawner, build_command, launch
from .log import logger
from .models import CollectionConfig, SiteEntry
from .platform import PLATFORM
from .resolver import ConfigResolver

LAUNCH_DELAY = 0.5  # seconds between consecutive launches


class RestoreOrchestrator:
    """Open every site of a collection with one resolved configuration.

    The configuration is resolved once per call. A site that fails to
    launch is logged and skipped; the remaining sites are still opened.
    Only a resolution failure propagates. Callers cannot tell how many
    sites failed except through the log.
    """

    def __init__(
        self,
        resolver: ConfigResolver,
        spawn: Spawner = subprocess.Popen,
        sleep: Callable[[float], None] = time.sleep,
        delay: float = LAUNCH_DELAY,
        platform: str = PLATFORM,
    ) -> None:
        self.resolver = resolver
        self.spawn = spawn
        self.sleep = sleep
        self.delay = delay
        self.platform = platform

    def restore(
        self, sites: Iterable[SiteEntry], config: CollectionConfig | None = None
    ) -> None:
        sites = list(sites)
        resolved = self.resolver.resolve(config or CollectionConfig())
        logger.info(
            "Starting browser restoration for %d sites with %s in %s mode",
            len(sites),
            resolved.browser,
            resolved.mode.value,
        )

        for index, site in enumerate(sites):
            if index:
                self.sleep(self.delay)
            try:
                launch(build_command(site.url, resolved, self.platform), self.spawn)
            except LaunchError as exc:
                logger.warning("Failed to open URL %s: %s", site.url, exc)
            else:
                logger.info("Opened URL %d: %s", index + 1, site.url)

        logger.info("Browser restoration completed")
