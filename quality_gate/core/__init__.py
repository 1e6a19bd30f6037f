"""
Core - Configuration shared by every quality gate component.
"""

from .config import Settings, settings

__all__ = ["Settings", "settings"]
