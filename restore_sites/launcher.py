"""Build and spawn browser invocation commands.

Platform differences are kept in two declarative tables:

* :data:`EXECUTABLES` – ``(platform, family)`` -> program (macOS: app name)
* :data:`LAUNCH_FLAGS` – ``(platform, family, mode)`` -> command-line flag

A mode without an entry for the browser gets no flag, i.e. it opens in
normal mode. The URL is always a single argv element; nothing is run
through a shell.
"""

from __future__ import annotations

import subprocess
from typing import Callable
from urllib.parse import quote, urlsplit

from .errors import LaunchError
from .log import logger
from .models import BrowserFamily, BrowserMode, ResolvedConfig
from .platform import PLATFORM

Spawner = Callable[..., object]

_F = BrowserFamily
_M = BrowserMode

EXECUTABLES: dict[tuple[str, BrowserFamily], str] = {
    ("macos", _F.CHROME): "Google Chrome",
    ("macos", _F.FIREFOX): "Firefox",
    ("macos", _F.SAFARI): "Safari",
    ("macos", _F.EDGE): "Microsoft Edge",
    ("windows", _F.CHROME): "chrome.exe",
    ("windows", _F.FIREFOX): "firefox.exe",
    ("windows", _F.EDGE): "msedge.exe",
    ("linux", _F.CHROME): "/opt/google/chrome/chrome",
    ("linux", _F.FIREFOX): "firefox",
    ("linux", _F.EDGE): "microsoft-edge",
}

LAUNCH_FLAGS: dict[tuple[str, BrowserFamily, BrowserMode], str] = {
    ("macos", _F.CHROME, _M.INCOGNITO): "--incognito",
    ("macos", _F.FIREFOX, _M.INCOGNITO): "--private-window",
    ("macos", _F.FIREFOX, _M.PRIVATE): "--private-window",
    ("macos", _F.SAFARI, _M.PRIVATE): "--private",
    ("windows", _F.CHROME, _M.INCOGNITO): "--incognito",
    ("windows", _F.EDGE, _M.INCOGNITO): "--incognito",
    ("windows", _F.FIREFOX, _M.INCOGNITO): "--private-window",
    ("windows", _F.FIREFOX, _M.PRIVATE): "--private-window",
    ("linux", _F.CHROME, _M.INCOGNITO): "--incognito",
    ("linux", _F.EDGE, _M.INCOGNITO): "--incognito",
    ("linux", _F.FIREFOX, _M.INCOGNITO): "--private-window",
    ("linux", _F.FIREFOX, _M.PRIVATE): "--private-window",
}

# Reserved URL characters stay as they are; spaces, quotes and
# non-ASCII text are percent-encoded. Existing %XX escapes survive.
_URL_SAFE = ":/?#[]@!$&'()*+,;=%~"


def escape_url(url: str) -> str:
    return quote(url.strip(), safe=_URL_SAFE)


def check_url(url: str) -> str:
    """Return *url* stripped, or raise :class:`LaunchError`.

    Only absolute URLs are handed to a browser. Anything starting with
    ``-`` would be read as a command-line switch.
    """
    url = url.strip()
    if url.startswith("-") or not urlsplit(url).scheme:
        raise LaunchError(f"Refusing to open {url!r}: not an absolute URL")
    return url


def launch_flag(
    family: BrowserFamily, mode: BrowserMode, platform: str = PLATFORM
) -> str | None:
    return LAUNCH_FLAGS.get((platform, family, mode))


def browser_program(config: ResolvedConfig, platform: str = PLATFORM) -> str:
    """Program to start: custom path, then custom name, then the table."""
    if config.custom_path:
        return config.custom_path
    if config.browser.is_custom:
        return config.browser.name  # type: ignore[return-value]
    program = EXECUTABLES.get((platform, config.browser.family))
    if program is None:
        logger.warning(
            "%s is not available on %s, using Chrome instead",
            config.browser,
            platform,
        )
        program = EXECUTABLES[(platform, BrowserFamily.CHROME)]
    return program


def build_command(
    url: str, config: ResolvedConfig, platform: str = PLATFORM
) -> list[str]:
    """Return the argv that opens *url* with *config* on *platform*.

    Raises :class:`LaunchError` for a URL that is not absolute.
    """
    url = check_url(url)
    program = browser_program(config, platform)
    flag = launch_flag(config.browser.family, config.mode, platform)

    if platform == "macos":
        # open -na "Google Chrome" --args --incognito <url>
        argv = ["open", "-na", program, "--args"]
    else:
        argv = [program]
    if flag:
        argv.append(flag)
    argv.append(escape_url(url))
    return argv


def launch(argv: list[str], spawn: Spawner = subprocess.Popen) -> None:
    """Start *argv* detached from our stdio; do not wait for it.

    Raises :class:`LaunchError` when the process cannot be started.
    """
    try:
        spawn(argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        raise LaunchError(f"Failed to launch {argv[0]!r}: {exc}") from exc
