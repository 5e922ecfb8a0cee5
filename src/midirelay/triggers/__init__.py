"""Trigger matching and dispatch."""

from .engine import TriggerEngine
from .matching import criterion_matches, matches, port_matches

__all__ = ["TriggerEngine", "criterion_matches", "matches", "port_matches"]
