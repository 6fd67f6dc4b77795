"""Tests for restore_sites.models -- JSON shape and validation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from restore_sites.errors import ParseError, ValidationError
from restore_sites.models import (
    CHROME,
    FIREFOX,
    SAFARI,
    BrowserFamily,
    BrowserKind,
    BrowserMode,
    BrowserProfile,
    CollectionConfig,
    CollectionRecord,
    Database,
    DatabaseMeta,
    SiteEntry,
    format_timestamp,
    parse_timestamp,
)


# -- timestamps --------------------------------------------------------------


class TestTimestamps:
    def test_format_uses_z_suffix(self):
        ts = datetime(2025, 3, 1, 12, 30, 0, tzinfo=timezone.utc)
        assert format_timestamp(ts) == "2025-03-01T12:30:00Z"

    def test_naive_treated_as_utc(self):
        assert format_timestamp(datetime(2025, 3, 1)) == "2025-03-01T00:00:00Z"

    def test_parse_nanoseconds(self):
        parsed = parse_timestamp("2025-03-01T12:30:00.123456789Z")
        assert parsed == datetime(2025, 3, 1, 12, 30, 0, 123456, tzinfo=timezone.utc)

    def test_parse_offset(self):
        parsed = parse_timestamp("2025-03-01T14:30:00+02:00")
        assert parsed.astimezone(timezone.utc).hour == 12

    def test_parse_garbage(self):
        with pytest.raises(ParseError):
            parse_timestamp("yesterday")

    def test_parse_non_string(self):
        with pytest.raises(ParseError):
            parse_timestamp(12345)


# -- browsers and modes ------------------------------------------------------


class TestBrowserKind:
    def test_known_family_serializes_as_string(self):
        assert CHROME.to_json() == "Chrome"

    def test_custom_serializes_as_object(self):
        assert BrowserKind.custom("/usr/bin/brave").to_json() == {"Custom": "/usr/bin/brave"}

    def test_from_json_custom(self):
        kind = BrowserKind.from_json({"Custom": "Brave Browser"})
        assert kind.is_custom
        assert kind.name == "Brave Browser"

    def test_from_json_unknown(self):
        with pytest.raises(ParseError):
            BrowserKind.from_json("Netscape")

    def test_from_json_custom_string_rejected(self):
        with pytest.raises(ParseError):
            BrowserKind.from_json("Custom")

    def test_custom_needs_name(self):
        with pytest.raises(ValidationError):
            BrowserKind(BrowserFamily.CUSTOM)

    def test_known_family_rejects_name(self):
        with pytest.raises(ValidationError):
            BrowserKind(BrowserFamily.CHROME, "x")

    def test_parse_case_insensitive(self):
        assert BrowserKind.parse("firefox") == FIREFOX
        assert BrowserKind.parse(" SAFARI ") == SAFARI

    def test_equality_and_hash(self):
        assert BrowserKind.custom("a") == BrowserKind.custom("a")
        assert len({CHROME, BrowserKind(BrowserFamily.CHROME)}) == 1

    def test_str(self):
        assert str(FIREFOX) == "Firefox"
        assert str(BrowserKind.custom("Brave")) == "Custom(Brave)"


class TestBrowserMode:
    def test_parse(self):
        assert BrowserMode.parse("incognito") is BrowserMode.INCOGNITO

    def test_parse_unknown(self):
        with pytest.raises(ValidationError):
            BrowserMode.parse("stealth")

    def test_from_json_unknown(self):
        with pytest.raises(ParseError):
            BrowserMode.from_json("stealth")


# -- collection config -------------------------------------------------------


class TestCollectionConfig:
    def test_empty_config_serializes_nulls(self):
        assert CollectionConfig().to_dict() == {
            "browser_profile_id": None,
            "browser": None,
            "mode": None,
            "custom_path": None,
        }

    def test_missing_keys_read_as_none(self):
        config = CollectionConfig.from_dict({})
        assert config == CollectionConfig()

    def test_inline_override_roundtrip(self):
        config = CollectionConfig(browser=FIREFOX, mode=BrowserMode.PRIVATE)
        assert CollectionConfig.from_dict(config.to_dict()) == config

    def test_not_an_object(self):
        with pytest.raises(ParseError):
            CollectionConfig.from_dict(["Chrome"])


# -- profiles ----------------------------------------------------------------


class TestBrowserProfile:
    def test_new_sets_defaults(self):
        profile = BrowserProfile.new("p1", "Work", CHROME, BrowserMode.NORMAL)
        assert profile.is_default is False
        assert profile.is_detected is False
        assert profile.custom_path is None
        assert profile.created_at == profile.updated_at

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            BrowserProfile.new("p1", "", CHROME, BrowserMode.NORMAL)

    def test_name_counts_code_points(self):
        BrowserProfile.new("p1", "é" * 64, CHROME, BrowserMode.NORMAL)
        with pytest.raises(ValidationError, match="64"):
            BrowserProfile.new("p1", "é" * 65, CHROME, BrowserMode.NORMAL)

    def test_missing_required_field(self):
        data = BrowserProfile.new("p1", "Work", CHROME, BrowserMode.NORMAL).to_dict()
        del data["is_default"]
        with pytest.raises(ParseError, match="is_default"):
            BrowserProfile.from_dict(data)

    def test_custom_path_optional_on_read(self):
        data = BrowserProfile.new("p1", "Work", CHROME, BrowserMode.NORMAL).to_dict()
        del data["custom_path"]
        assert BrowserProfile.from_dict(data).custom_path is None


# -- records and document ----------------------------------------------------


class TestCollectionRecord:
    def test_unsaved_record_has_sentinel_id(self):
        assert CollectionRecord(name="x").id == 0

    def test_roundtrip(self):
        record = CollectionRecord(
            name="Reading",
            sites=[SiteEntry("A", "https://a.example")],
            config=CollectionConfig(browser_profile_id="p1"),
            id=7,
        )
        assert CollectionRecord.from_dict(record.to_dict()) == record

    def test_negative_id_rejected(self):
        data = CollectionRecord(name="x").to_dict()
        data["id"] = -1
        with pytest.raises(ParseError):
            CollectionRecord.from_dict(data)

    def test_bool_id_rejected(self):
        data = CollectionRecord(name="x").to_dict()
        data["id"] = True
        with pytest.raises(ParseError):
            CollectionRecord.from_dict(data)

    def test_site_missing_url(self):
        data = CollectionRecord(name="x").to_dict()
        data["sites"] = [{"title": "no url"}]
        with pytest.raises(ParseError, match="url"):
            CollectionRecord.from_dict(data)


class TestDatabase:
    def test_default_meta(self):
        meta = DatabaseMeta()
        assert meta.version == 2
        assert meta.max_id == 0
        assert meta.record_count == 0
        assert meta.default_browser_mode is BrowserMode.INCOGNITO

    def test_document_keys(self):
        data = Database().to_dict()
        assert set(data) == {"meta", "profiles", "data"}
        assert set(data["meta"]) == {
            "version",
            "last_updated_id",
            "last_updated",
            "max_id",
            "record_count",
            "created_at",
            "default_browser_mode",
        }

    def test_missing_profiles_table(self):
        data = Database().to_dict()
        del data["profiles"]
        with pytest.raises(ParseError, match="profiles"):
            Database.from_dict(data)

    def test_not_an_object(self):
        with pytest.raises(ParseError):
            Database.from_dict([])
