"""Availability domain - Doctor time slots and conflict detection"""

from .router import router

__all__ = ["router"]
