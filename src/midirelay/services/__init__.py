"""Application services."""

from .config_service import ConfigService
from .profile_service import ProfileService

__all__ = ["ConfigService", "ProfileService"]
