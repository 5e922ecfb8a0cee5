"""CLI commands for midirelay."""

from .ports import ports_group
from .profiles import profiles_group
from .run import run
from .send import send
from .triggers import triggers_group

__all__ = ["ports_group", "profiles_group", "run", "send", "triggers_group"]
