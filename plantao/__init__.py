"""Plantão API - shift scheduling backend for doctors"""

__version__ = "1.0.0"
