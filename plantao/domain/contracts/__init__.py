"""Contracts domain - Accepted shifts, cancellation and attendance"""

from .router import router

__all__ = ["router"]
