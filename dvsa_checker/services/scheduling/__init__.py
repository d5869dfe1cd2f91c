"""Scheduling primitives."""

from .repeating_timer import RepeatingTimer

__all__ = ["RepeatingTimer"]
