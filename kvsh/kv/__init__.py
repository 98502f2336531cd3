"""Database backends."""

from .base import Database, Transaction
from .disk import Disk
from .memory import Memory

__all__ = ["Database", "Disk", "Memory", "Transaction"]
