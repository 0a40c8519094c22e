"""Local persistence"""

from questboard.db.local_store import LocalStore

__all__ = ["LocalStore"]
