"""Browser profile registry, stored in the ``profiles`` table of ``db.json``."""

from __future__ import annotations

from ..detection import BrowserDetector, detector_for_platform
from ..errors import AlreadyExistsError, NotFoundError, ValidationError
from ..log import logger
from ..models import BrowserMode, BrowserProfile, utc_now
from .database import DatabaseStore


class ProfileRegistry:
    """CRUD over browser profiles plus the global default mode.

    Shares the document of a :class:`DatabaseStore` and follows the same
    load-modify-save discipline.
    """

    def __init__(
        self, store: DatabaseStore, detector: BrowserDetector | None = None
    ) -> None:
        self.store = store
        self.detector = detector or detector_for_platform()

    # -- CRUD -----------------------------------------------------------------

    def create_profile(self, profile: BrowserProfile) -> BrowserProfile:
        """Add *profile*. Raise :class:`AlreadyExistsError` on a duplicate id."""
        database = self.store.load()
        if any(p.id == profile.id for p in database.profiles):
            raise AlreadyExistsError(f"Profile with ID {profile.id!r} already exists")
        database.profiles.append(profile)
        database.meta.last_updated = utc_now()
        self.store.save(database)
        logger.info("Created new browser profile: %s", profile.id)
        return profile

    def get_profile(self, profile_id: str) -> BrowserProfile | None:
        return next((p for p in self.store.load().profiles if p.id == profile_id), None)

    def get_all_profiles(self) -> list[BrowserProfile]:
        return self.store.load().profiles

    def get_default_profile(self) -> BrowserProfile | None:
        """First profile flagged ``is_default``, if any."""
        return next((p for p in self.store.load().profiles if p.is_default), None)

    def update_profile(self, profile_id: str, profile: BrowserProfile) -> BrowserProfile:
        """Replace the profile stored under *profile_id*, keeping its position.

        Raises :class:`ValidationError` when *profile* carries another id.
        """
        if profile.id != profile_id:
            raise ValidationError(
                f"Profile id {profile.id!r} does not match {profile_id!r}"
            )
        database = self.store.load()
        for index, existing in enumerate(database.profiles):
            if existing.id == profile_id:
                profile.updated_at = utc_now()
                database.profiles[index] = profile
                break
        else:
            raise NotFoundError(f"Profile with ID {profile_id!r} not found for update")

        database.meta.last_updated = utc_now()
        self.store.save(database)
        logger.info("Updated browser profile: %s", profile_id)
        return profile

    def delete_profile(self, profile_id: str) -> bool:
        """Remove the profile. Return ``False`` if there was none."""
        database = self.store.load()
        remaining = [p for p in database.profiles if p.id != profile_id]
        if len(remaining) == len(database.profiles):
            logger.warning("Profile with ID %r not found for deletion", profile_id)
            return False
        database.profiles = remaining
        database.meta.last_updated = utc_now()
        self.store.save(database)
        logger.info("Deleted browser profile: %s", profile_id)
        return True

    def set_default_profile(self, profile_id: str) -> BrowserProfile:
        """Make *profile_id* the only default profile."""
        database = self.store.load()
        target = next((p for p in database.profiles if p.id == profile_id), None)
        if target is None:
            raise NotFoundError(f"Profile with ID {profile_id!r} not found")
        now = utc_now()
        for profile in database.profiles:
            flag = profile is target
            if profile.is_default != flag:
                profile.is_default = flag
                profile.updated_at = now
        database.meta.last_updated = now
        self.store.save(database)
        logger.info("Default browser profile is now: %s", profile_id)
        return target

    # -- global default mode --------------------------------------------------

    def get_default_browser_mode(self) -> BrowserMode:
        return self.store.load().meta.default_browser_mode

    def set_default_browser_mode(self, mode: BrowserMode) -> None:
        database = self.store.load()
        database.meta.default_browser_mode = mode
        database.meta.last_updated = utc_now()
        self.store.save(database)
        logger.info("Updated default browser mode to: %s", mode.value)

    # -- detection ------------------------------------------------------------

    def update_all_detection_status(self) -> list[BrowserProfile]:
        """Re-probe every profile's browser and persist changed flags.

        Returns the full profile list as stored afterwards.
        """
        profiles = self.get_all_profiles()
        for profile in profiles:
            detected = self.detector.detect(profile.browser)
            if profile.is_detected != detected:
                profile.is_detected = detected
                self.update_profile(profile.id, profile)
        logger.info("Updated detection status for %d profiles", len(profiles))
        return profiles
