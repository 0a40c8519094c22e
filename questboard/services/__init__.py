"""Application services"""

from questboard.services.profile_service import ProfileStore
from questboard.services.export_service import export_csv, export_filename

__all__ = ["ProfileStore", "export_csv", "export_filename"]
