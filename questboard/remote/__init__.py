"""Shared remote activity log backends"""

from questboard.remote.activity_log import (
    RemoteActivityLog,
    LocalOnlyActivityLog,
    FirestoreActivityLog,
    create_activity_log,
)

__all__ = [
    "RemoteActivityLog",
    "LocalOnlyActivityLog",
    "FirestoreActivityLog",
    "create_activity_log",
]
