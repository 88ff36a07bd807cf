"""
shorturl package initializer.
"""

from . import errors
from . import manager
from . import storage

__all__ = ["errors", "manager", "storage"]
