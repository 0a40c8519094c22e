"""Configuration management"""
import os
import logging
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from questboard.exceptions import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
STORE_PATH: Path = Path(os.getenv("STORE_PATH", str(DATA_PATH / "questboard.db")))
# Keys are STORAGE_PREFIX + profile name; the profile list lives under STORAGE_PREFIX + "profiles"
STORAGE_PREFIX: str = os.getenv("STORAGE_PREFIX", "questboard-multi-")

# Calendar days are assigned in this timezone
TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Optional shared activity log (Firestore). Remote sync is off unless both are set.
FIREBASE_API_KEY: str = os.getenv("FIREBASE_API_KEY", "")
FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "")
FIRESTORE_COLLECTION: str = os.getenv("FIRESTORE_COLLECTION", "activities")
REMOTE_TIMEOUT_SECONDS: float = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "10"))

# API server
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


def remote_enabled(api_key: Optional[str] = None, project_id: Optional[str] = None) -> bool:
    """
    Remote sync is gated on the presence of both Firebase settings

    Arguments left as None fall back to FIREBASE_API_KEY / FIREBASE_PROJECT_ID.
    """
    if api_key is None:
        api_key = FIREBASE_API_KEY
    if project_id is None:
        project_id = FIREBASE_PROJECT_ID
    return bool(api_key and project_id)


# Validation
def validate_config() -> None:
    """Validate configuration"""
    if not isinstance(getattr(logging, LOG_LEVEL.upper(), None), int):
        raise ConfigurationError(
            message=f"Unknown LOG_LEVEL '{LOG_LEVEL}'",
            config_key="LOG_LEVEL"
        )

    try:
        ZoneInfo(TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            message=f"Unknown TIMEZONE '{TIMEZONE}'",
            config_key="TIMEZONE",
            cause=e
        )

    if bool(FIREBASE_API_KEY) != bool(FIREBASE_PROJECT_ID):
        # Half-configured remote is not fatal, the app just runs local-only
        logger.warning(
            "Only one of FIREBASE_API_KEY / FIREBASE_PROJECT_ID is set - "
            "running local-only"
        )
