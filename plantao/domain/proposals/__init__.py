"""Proposals domain - Shift offers and their acceptance"""

from .router import router

__all__ = ["router"]
