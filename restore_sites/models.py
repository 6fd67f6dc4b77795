"""Data model for the restore-sites document.

Every persisted type is a dataclass with ``to_dict()`` / ``from_dict()``
converters. The JSON shape is the one stored in ``db.json``:

* browsers are ``"Chrome"``, ``"Firefox"``, ``"Safari"``, ``"Edge"`` or
  ``{"Custom": "<name or path>"}``
* modes are ``"Normal"``, ``"Incognito"`` or ``"Private"``
* timestamps are ISO 8601 UTC strings with a ``Z`` suffix
* optional values are written as ``null`` and may be omitted on read

``from_dict`` raises :class:`~restore_sites.errors.ParseError` on any
shape mismatch, carrying the offending key in the message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .errors import ParseError, ValidationError

SCHEMA_VERSION = 2
PROFILE_NAME_MAX = 64

# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

# Trim sub-microsecond digits (other writers emit nanoseconds).
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render *value* as ``YYYY-MM-DDTHH:MM:SS[.ffffff]Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any, key: str = "timestamp") -> datetime:
    """Parse an ISO 8601 string; naive values are taken as UTC."""
    if not isinstance(value, str):
        raise ParseError(f"{key}: expected an ISO 8601 string, got {value!r}")
    text = _FRACTION_RE.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(f"{key}: {exc}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _expect_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ParseError(f"{what}: expected an object, got {type(data).__name__}")
    return data


def _require(data: dict, key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ParseError(f"{what}: missing field `{key}`") from None


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ParseError(f"{key}: expected a string, got {value!r}")
    return value


def _optional_string(value: Any, key: str) -> str | None:
    return None if value is None else _string(value, key)


def _unsigned(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError(f"{key}: expected a non-negative integer, got {value!r}")
    return value


def _boolean(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ParseError(f"{key}: expected a boolean, got {value!r}")
    return value


def _list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ParseError(f"{key}: expected an array, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Browser kinds and modes
# ---------------------------------------------------------------------------


class BrowserFamily(str, Enum):
    CHROME = "Chrome"
    FIREFOX = "Firefox"
    SAFARI = "Safari"
    EDGE = "Edge"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class BrowserKind:
    """A browser: one of the known families, or ``Custom(name)``.

    For ``Custom`` the *name* is an application name on macOS and an
    executable path elsewhere.
    """

    family: BrowserFamily
    name: str | None = None

    def __post_init__(self) -> None:
        if self.family is BrowserFamily.CUSTOM:
            if not self.name:
                raise ValidationError("Custom browser requires a name or path")
        elif self.name is not None:
            raise ValidationError(f"{self.family.value} does not take a name")

    @classmethod
    def custom(cls, name: str) -> BrowserKind:
        return cls(BrowserFamily.CUSTOM, name)

    @classmethod
    def parse(cls, text: str) -> BrowserKind:
        """Parse a family name (case-insensitive); ``Custom`` is not accepted."""
        for family in BrowserFamily:
            if family is not BrowserFamily.CUSTOM and family.value.lower() == text.strip().lower():
                return cls(family)
        raise ValidationError(f"Unknown browser: {text!r}")

    @property
    def is_custom(self) -> bool:
        return self.family is BrowserFamily.CUSTOM

    def to_json(self) -> str | dict[str, str]:
        if self.is_custom:
            return {BrowserFamily.CUSTOM.value: self.name}  # type: ignore[dict-item]
        return self.family.value

    @classmethod
    def from_json(cls, value: Any, key: str = "browser") -> BrowserKind:
        if isinstance(value, str):
            for family in BrowserFamily:
                if family is not BrowserFamily.CUSTOM and family.value == value:
                    return cls(family)
            raise ParseError(f"{key}: unknown variant `{value}`")
        if isinstance(value, dict) and list(value) == [BrowserFamily.CUSTOM.value]:
            name = _string(value[BrowserFamily.CUSTOM.value], f"{key}.Custom")
            try:
                return cls.custom(name)
            except ValidationError as exc:
                raise ParseError(f"{key}: {exc}") from exc
        raise ParseError(f"{key}: expected a browser variant, got {value!r}")

    def __str__(self) -> str:
        if self.is_custom:
            return f"Custom({self.name})"
        return self.family.value


CHROME = BrowserKind(BrowserFamily.CHROME)
FIREFOX = BrowserKind(BrowserFamily.FIREFOX)
SAFARI = BrowserKind(BrowserFamily.SAFARI)
EDGE = BrowserKind(BrowserFamily.EDGE)


class BrowserMode(str, Enum):
    NORMAL = "Normal"
    INCOGNITO = "Incognito"
    PRIVATE = "Private"

    @classmethod
    def parse(cls, text: str) -> BrowserMode:
        for mode in cls:
            if mode.value.lower() == text.strip().lower():
                return mode
        raise ValidationError(f"Unknown browser mode: {text!r}")

    @classmethod
    def from_json(cls, value: Any, key: str = "mode") -> BrowserMode:
        try:
            return cls(value)
        except ValueError:
            raise ParseError(f"{key}: unknown variant {value!r}") from None


# ---------------------------------------------------------------------------
# Sites and collection configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SiteEntry:
    title: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "url": self.url}

    @classmethod
    def from_dict(cls, data: Any) -> SiteEntry:
        data = _expect_mapping(data, "site")
        return cls(
            title=_string(_require(data, "title", "site"), "site.title"),
            url=_string(_require(data, "url", "site"), "site.url"),
        )


@dataclass
class CollectionConfig:
    """Per-collection browser settings.

    Either a reference to a stored profile or an inline browser/mode/path
    override. Every field may be absent; resolution fills the gaps.
    """

    browser_profile_id: str | None = None
    browser: BrowserKind | None = None
    mode: BrowserMode | None = None
    custom_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "browser_profile_id": self.browser_profile_id,
            "browser": self.browser.to_json() if self.browser else None,
            "mode": self.mode.value if self.mode else None,
            "custom_path": self.custom_path,
        }

    @classmethod
    def from_dict(cls, data: Any) -> CollectionConfig:
        data = _expect_mapping(data, "config")
        browser = data.get("browser")
        mode = data.get("mode")
        return cls(
            browser_profile_id=_optional_string(
                data.get("browser_profile_id"), "config.browser_profile_id"
            ),
            browser=None if browser is None else BrowserKind.from_json(browser, "config.browser"),
            mode=None if mode is None else BrowserMode.from_json(mode, "config.mode"),
            custom_path=_optional_string(data.get("custom_path"), "config.custom_path"),
        )


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully specified browser settings for one restore."""

    browser: BrowserKind
    mode: BrowserMode
    custom_path: str | None = None


# ---------------------------------------------------------------------------
# Browser profiles
# ---------------------------------------------------------------------------


@dataclass
class BrowserProfile:
    id: str
    name: str
    browser: BrowserKind
    mode: BrowserMode
    custom_path: str | None = None
    is_default: bool = False
    is_detected: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @staticmethod
    def validate_name(name: str) -> None:
        """Names are 1-64 code points."""
        if len(name) == 0:
            raise ValidationError("Profile name cannot be empty")
        if len(name) > PROFILE_NAME_MAX:
            raise ValidationError(
                f"Profile name cannot exceed {PROFILE_NAME_MAX} characters"
            )

    @classmethod
    def new(
        cls,
        id: str,
        name: str,
        browser: BrowserKind,
        mode: BrowserMode,
        custom_path: str | None = None,
    ) -> BrowserProfile:
        cls.validate_name(name)
        now = utc_now()
        return cls(
            id=id,
            name=name,
            browser=browser,
            mode=mode,
            custom_path=custom_path,
            created_at=now,
            updated_at=now,
        )

    def resolved(self) -> ResolvedConfig:
        return ResolvedConfig(self.browser, self.mode, self.custom_path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "browser": self.browser.to_json(),
            "mode": self.mode.value,
            "custom_path": self.custom_path,
            "is_default": self.is_default,
            "is_detected": self.is_detected,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> BrowserProfile:
        data = _expect_mapping(data, "profile")

        def req(key: str) -> Any:
            return _require(data, key, "profile")

        return cls(
            id=_string(req("id"), "profile.id"),
            name=_string(req("name"), "profile.name"),
            browser=BrowserKind.from_json(req("browser"), "profile.browser"),
            mode=BrowserMode.from_json(req("mode"), "profile.mode"),
            custom_path=_optional_string(data.get("custom_path"), "profile.custom_path"),
            is_default=_boolean(req("is_default"), "profile.is_default"),
            is_detected=_boolean(req("is_detected"), "profile.is_detected"),
            created_at=parse_timestamp(req("created_at"), "profile.created_at"),
            updated_at=parse_timestamp(req("updated_at"), "profile.updated_at"),
        )


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@dataclass
class CollectionRecord:
    """A named, ordered list of sites. ``id == 0`` means not yet stored."""

    name: str
    sites: list[SiteEntry] = field(default_factory=list)
    config: CollectionConfig = field(default_factory=CollectionConfig)
    id: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def copy(self, **changes: Any) -> CollectionRecord:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sites": [site.to_dict() for site in self.sites],
            "config": self.config.to_dict(),
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> CollectionRecord:
        data = _expect_mapping(data, "record")

        def req(key: str) -> Any:
            return _require(data, key, "record")

        return cls(
            id=_unsigned(req("id"), "record.id"),
            name=_string(req("name"), "record.name"),
            sites=[SiteEntry.from_dict(s) for s in _list(req("sites"), "record.sites")],
            config=CollectionConfig.from_dict(req("config")),
            created_at=parse_timestamp(req("created_at"), "record.created_at"),
            updated_at=parse_timestamp(req("updated_at"), "record.updated_at"),
        )


# ---------------------------------------------------------------------------
# Document root
# ---------------------------------------------------------------------------


@dataclass
class DatabaseMeta:
    version: int = SCHEMA_VERSION
    max_id: int = 0
    record_count: int = 0
    last_updated_id: int = 0
    last_updated: datetime = field(default_factory=utc_now)
    created_at: datetime = field(default_factory=utc_now)
    default_browser_mode: BrowserMode = BrowserMode.INCOGNITO

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "last_updated_id": self.last_updated_id,
            "last_updated": format_timestamp(self.last_updated),
            "max_id": self.max_id,
            "record_count": self.record_count,
            "created_at": format_timestamp(self.created_at),
            "default_browser_mode": self.default_browser_mode.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> DatabaseMeta:
        data = _expect_mapping(data, "meta")

        def req(key: str) -> Any:
            return _require(data, key, "meta")

        return cls(
            version=_unsigned(req("version"), "meta.version"),
            max_id=_unsigned(req("max_id"), "meta.max_id"),
            record_count=_unsigned(req("record_count"), "meta.record_count"),
            last_updated_id=_unsigned(req("last_updated_id"), "meta.last_updated_id"),
            last_updated=parse_timestamp(req("last_updated"), "meta.last_updated"),
            created_at=parse_timestamp(req("created_at"), "meta.created_at"),
            default_browser_mode=BrowserMode.from_json(
                req("default_browser_mode"), "meta.default_browser_mode"
            ),
        )


@dataclass
class Database:
    meta: DatabaseMeta = field(default_factory=DatabaseMeta)
    profiles: list[BrowserProfile] = field(default_factory=list)
    data: list[CollectionRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "profiles": [p.to_dict() for p in self.profiles],
            "data": [r.to_dict() for r in self.data],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Database:
        data = _expect_mapping(data, "database")
        return cls(
            meta=DatabaseMeta.from_dict(_require(data, "meta", "database")),
            profiles=[
                BrowserProfile.from_dict(p)
                for p in _list(_require(data, "profiles", "database"), "profiles")
            ],
            data=[
                CollectionRecord.from_dict(r)
                for r in _list(_require(data, "data", "database"), "data")
            ],
        )
