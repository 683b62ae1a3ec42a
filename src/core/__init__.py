"""
Core runtime configuration for genevec.
"""

from src.core.config import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
