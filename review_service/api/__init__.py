"""
API module initialization
"""

from . import reviews, health, home

__all__ = ["reviews", "health", "home"]
