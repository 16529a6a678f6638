import os
from datetime import datetime, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./club.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Empty means "server local time"
CLUB_TIMEZONE = os.getenv("CLUB_TIMEZONE", "").strip()

# Background status sweep period; 0 disables the worker
STATUS_SWEEP_INTERVAL_SECONDS = int(os.getenv("STATUS_SWEEP_INTERVAL_SECONDS", "60"))


def cors_origins() -> List[str]:
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    extra = os.getenv("CORS_ORIGINS", "")
    if extra:
        origins.extend(o.strip() for o in extra.split(",") if o.strip())
    return origins


def utc_now() -> datetime:
    """Timezone-aware UTC instant used for every stored timestamp."""
    return datetime.now(timezone.utc)


def club_now(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the club's timezone, as a naive datetime.

    Match dates and time ranges are stored as local wall-clock values, so the
    comparison instant must live in the same frame.
    """
    name = CLUB_TIMEZONE if tz_name is None else tz_name
    if not name:
        return datetime.now()
    return datetime.now(ZoneInfo(name)).replace(tzinfo=None)
