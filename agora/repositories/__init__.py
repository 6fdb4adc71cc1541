"""
Persistence adapters.

Services depend on JsonStorage instead of touching the data file directly.
"""

from .json_storage import JsonStorage

__all__ = ["JsonStorage"]
