"""Profile domain - Doctor profile sections and credentialing documents"""

from .router import router

__all__ = ["router"]
