"""Browser configuration resolution.

A collection's :class:`CollectionConfig` is turned into a fully specified
:class:`ResolvedConfig` by walking a fixed chain of strategies; the first
one that returns a value wins:

1. ``profile_reference``  – the profile named by ``browser_profile_id``
2. ``inline_override``    – ``browser`` / ``mode`` / ``custom_path`` on the config
3. ``default_profile``    – the stored profile flagged ``is_default``
4. ``hardcoded_fallback`` – Chrome in the global default mode

A profile id that no longer resolves is logged and skipped, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .log import logger
from .models import CHROME, BrowserMode, BrowserProfile, CollectionConfig, ResolvedConfig

if TYPE_CHECKING:
    from .persistence import ProfileRegistry

ProfileLookup = Callable[[str], "BrowserProfile | None"]
DefaultProfileLookup = Callable[[], "BrowserProfile | None"]


@dataclass(frozen=True)
class ResolutionContext:
    config: CollectionConfig
    profile_lookup: ProfileLookup
    default_profile_lookup: DefaultProfileLookup
    global_default_mode: BrowserMode


Strategy = Callable[[ResolutionContext], "ResolvedConfig | None"]


def profile_reference(ctx: ResolutionContext) -> ResolvedConfig | None:
    profile_id = ctx.config.browser_profile_id
    if not profile_id:
        return None
    profile = ctx.profile_lookup(profile_id)
    if profile is None:
        logger.warning(
            "Profile %r not found, falling back to direct config", profile_id
        )
        return None
    return profile.resolved()


def inline_override(ctx: ResolutionContext) -> ResolvedConfig | None:
    if ctx.config.browser is None:
        return None
    return ResolvedConfig(
        browser=ctx.config.browser,
        mode=ctx.config.mode or BrowserMode.NORMAL,
        custom_path=ctx.config.custom_path,
    )


def default_profile(ctx: ResolutionContext) -> ResolvedConfig | None:
    profile = ctx.default_profile_lookup()
    return profile.resolved() if profile else None


def hardcoded_fallback(ctx: ResolutionContext) -> ResolvedConfig:
    return ResolvedConfig(browser=CHROME, mode=ctx.global_default_mode)


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("profile_reference", profile_reference),
    ("inline_override", inline_override),
    ("default_profile", default_profile),
    ("hardcoded_fallback", hardcoded_fallback),
)


def resolve(
    config: CollectionConfig,
    profile_lookup: ProfileLookup,
    default_profile_lookup: DefaultProfileLookup,
    global_default_mode: BrowserMode,
) -> ResolvedConfig:
    """Resolve *config* through :data:`STRATEGIES`."""
    ctx = ResolutionContext(
        config, profile_lookup, default_profile_lookup, global_default_mode
    )
    for name, strategy in STRATEGIES:
        resolved = strategy(ctx)
        if resolved is not None:
            logger.debug(
                "Resolved browser config via %s: %s / %s",
                name,
                resolved.browser,
                resolved.mode.value,
            )
            return resolved
    # hardcoded_fallback always answers
    raise AssertionError("resolution chain exhausted")


class ConfigResolver:
    """Bind :func:`resolve` to a :class:`~restore_sites.persistence.ProfileRegistry`."""

    def __init__(self, registry: ProfileRegistry) -> None:
        self.registry = registry

    def resolve(self, config: CollectionConfig) -> ResolvedConfig:
        return resolve(
            config,
            self.registry.get_profile,
            self.registry.get_default_profile,
            self.registry.get_default_browser_mode(),
        )
