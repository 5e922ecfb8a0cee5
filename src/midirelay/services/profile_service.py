"""Service for named snapshots of the trigger list."""

import logging
from typing import Callable, Optional

from midirelay.models import Trigger
from midirelay.services.config_service import ConfigService

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Saves and restores trigger profiles.

    A profile is a named copy of the trigger list stored under `profiles`
    in the config store. Loading a profile replaces the trigger list and
    asks the caller to reload the active trigger set.
    """

    def __init__(self, config: ConfigService, apply_triggers: Callable[[list[Trigger]], None]):
        """
        Initialize the ProfileService.

        Args:
            config: Settings store holding `triggers` and `profiles`
            apply_triggers: Persists a trigger list and reloads the active set
        """
        self._config = config
        self._apply_triggers = apply_triggers

    def list_profiles(self) -> list[str]:
        return sorted(self._config.get("profiles", {}))

    def save_profile(self, name: str) -> list[Trigger]:
        """
        Snapshot the current triggers under a name, overwriting any
        existing profile with that name.

        Returns:
            The saved trigger list
        """
        if not name:
            raise ValueError("Profile name is required")

        triggers = self._config.get("triggers", [])

        def store(profiles: dict[str, list[Trigger]]) -> dict[str, list[Trigger]]:
            profiles[name] = triggers
            return profiles

        self._config.modify("profiles", store)
        logger.info(f"Saved profile '{name}' ({len(triggers)} trigger(s))")
        return triggers

    def load_profile(self, name: str) -> bool:
        """
        Replace the trigger list with a saved profile.

        Returns:
            False if no profile has that name
        """
        profiles = self._config.get("profiles", {})
        if name not in profiles:
            logger.warning(f"Profile not found: {name}")
            return False

        self._apply_triggers(profiles[name])
        logger.info(f"Loaded profile '{name}'")
        return True

    def delete_profile(self, name: str) -> bool:
        def remove(profiles: dict[str, list[Trigger]]) -> Optional[dict[str, list[Trigger]]]:
            return profiles if profiles.pop(name, None) is not None else None

        if self._config.modify("profiles", remove) is None:
            return False
        logger.info(f"Deleted profile '{name}'")
        return True
