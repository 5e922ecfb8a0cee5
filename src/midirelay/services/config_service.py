"""Configuration service: the relay's key-value settings store."""

import copy
import logging
from pathlib import Path
from collections.abc import Callable
from threading import RLock
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from midirelay.utils import PydanticPersistence

logger = logging.getLogger(__name__)

ConfigType = TypeVar("ConfigType", bound=BaseModel)


class ConfigService(Generic[ConfigType]):
    """
    Thread-safe get/set access to a Pydantic configuration model.

    Every write re-validates the whole model, so an invalid value never
    reaches the stored configuration. When constructed with a path, every
    successful write is persisted immediately (the relay treats this service
    as its persisted store for triggers, disabled inputs and profiles).

    Usage Example:
        ```python
        service = ConfigService.from_file(RelayConfig, Path("~/.midirelay/config.json"))
        timeout = service.get("http_timeout")
        service.set("disabled_inputs", ["IAC Bus 2"])
        ```
    """

    def __init__(
        self,
        config_type: type[ConfigType],
        initial_config: Optional[ConfigType] = None,
        default_path: Optional[Path] = None,
        auto_save: bool = True,
    ):
        """
        Initialize the configuration service.

        Args:
            config_type: The Pydantic model class (e.g., RelayConfig)
            initial_config: The initial configuration (defaults if None)
            default_path: Path used by save()/load() and auto-save
            auto_save: Persist after every write when default_path is set
        """
        self._config_type = config_type
        self._config = initial_config if initial_config is not None else config_type()
        self._default_path = default_path
        self._auto_save = auto_save
        self._lock = RLock()

        logger.info(f"ConfigService initialized with {config_type.__name__}")

    @classmethod
    def from_file(cls, config_type: type[ConfigType], path: Path, auto_save: bool = True) -> "ConfigService[ConfigType]":
        """
        Create a service backed by a JSON file, using defaults if it is missing.

        Raises:
            ConfigFileInvalidError: If the file has invalid JSON syntax
            ConfigValidationError: If the file has invalid values
        """
        config = PydanticPersistence.load_json_or_default(path, config_type)
        return cls(config_type, config, default_path=path, auto_save=auto_save)

    @property
    def path(self) -> Optional[Path]:
        return self._default_path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a copy of a configuration value.

        Returns a deep copy, so callers may mutate the result freely.
        """
        with self._lock:
            if key not in self._config_type.model_fields:
                return default
            return copy.deepcopy(getattr(self._config, key))

    def get_config(self) -> ConfigType:
        """Get a deep copy of the entire configuration object."""
        with self._lock:
            return self._config.model_copy(deep=True)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        Raises:
            AttributeError: If key doesn't exist in the config model
            ValidationError: If the value fails Pydantic validation
        """
        self.update({key: value})

    def update(self, values: dict[str, Any]) -> None:
        """
        Update several values atomically (all or nothing).

        Raises:
            AttributeError: If any key doesn't exist in the config model
            ValidationError: If any value fails Pydantic validation
        """
        with self._lock:
            for key in values:
                if key not in self._config_type.model_fields:
                    raise AttributeError(f"'{self._config_type.__name__}' has no field '{key}'")

            try:
                current = self._config.model_dump()
                current.update(values)
                self._config = self._config_type.model_validate(current)
            except ValidationError as e:
                logger.error(f"Validation error updating {list(values)}: {e}")
                raise

            logger.debug(f"Config updated: {list(values)}")

            # Saved under the lock so writes reach the file in the order they were made
            if self._auto_save and self._default_path is not None:
                PydanticPersistence.save_json(self._config, self._default_path)

    def modify(self, key: str, fn: Callable[[Any], Any]) -> Any:
        """
        Read-modify-write a single value without interleaving other writers.

        `fn` receives a copy of the current value and returns the new one,
        or None to leave the value unchanged. The lock is reentrant, so `fn`
        may read other keys with get().

        Returns:
            The value returned by `fn`

        Raises:
            AttributeError: If key doesn't exist in the config model
            ValidationError: If the new value fails Pydantic validation
        """
        with self._lock:
            if key not in self._config_type.model_fields:
                raise AttributeError(f"'{self._config_type.__name__}' has no field '{key}'")

            new_value = fn(copy.deepcopy(getattr(self._config, key)))
            if new_value is not None:
                self.update({key: new_value})
            return new_value

    def load(self, path: Optional[Path] = None) -> None:
        """
        Replace the configuration with the contents of a file.

        Raises:
            ValueError: If no path specified and no default_path set
            FileNotFoundError: If the file doesn't exist
        """
        file_path = path or self._default_path
        if file_path is None:
            raise ValueError("No path specified and no default_path set")

        new_config = PydanticPersistence.load_json(Path(file_path), self._config_type)
        with self._lock:
            self._config = new_config
        logger.info(f"Config loaded from {file_path}")

    def save(self, path: Optional[Path] = None) -> None:
        """
        Write the configuration to a file.

        Raises:
            ValueError: If no path specified and no default_path set
        """
        file_path = path or self._default_path
        if file_path is None:
            raise ValueError("No path specified and no default_path set")

        with self._lock:
            config_copy = self._config.model_copy(deep=True)

        PydanticPersistence.save_json(config_copy, Path(file_path))
        logger.info(f"Config saved to {file_path}")
