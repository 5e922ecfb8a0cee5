"""Generic utilities: observer fan-out and Pydantic JSON persistence."""

from .observer import ObserverManager
from .persistence import PydanticPersistence

__all__ = ["ObserverManager", "PydanticPersistence"]
