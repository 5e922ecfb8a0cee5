"""Relay core."""

from .relay import RelayEngine

__all__ = ["RelayEngine"]
