# orderdesk/core/config.py

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Tuple

from dotenv import load_dotenv

load_dotenv()


DEFAULT_DATE_RANGES = (
    "week1=2024-10-14T00:00:00/2024-10-21T00:00:00,"
    "week2=2024-10-21T00:00:00/2024-10-28T00:00:00"
)


def _get_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def parse_date_ranges(raw: str) -> Dict[str, Tuple[datetime, datetime]]:
    """
    Parse `name=start/end` pairs separated by commas.
    Each range is half-open: start <= timestamp < end.
    """
    ranges: Dict[str, Tuple[datetime, datetime]] = {}
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, bounds = chunk.partition("=")
        start_raw, slash, end_raw = bounds.partition("/")
        if not sep or not slash:
            raise ValueError(f"Invalid date range entry: {chunk!r}")
        name = name.strip()
        if name == "all":
            raise ValueError("'all' is reserved and cannot name a date range")
        start = datetime.fromisoformat(start_raw.strip())
        end = datetime.fromisoformat(end_raw.strip())
        if end <= start:
            raise ValueError(f"Date range {name!r} ends before it starts")
        ranges[name] = (start, end)
    return ranges


class Settings:
    """
    Single app configuration (stateless).
    - DB: DATABASE_URL first, else MySQL from DB_*, else local SQLite.
    - Logs: JSON on stdout by default.
    - Analytics: named date ranges for the `date` filter.
    """

    def __init__(self) -> None:
        # ---------- Metadata ----------
        self.ENV = os.getenv("ENV", "dev")
        self.APP_NAME = os.getenv("APP_NAME", "orderdesk")
        self.APP_TITLE = os.getenv("APP_TITLE", "Orderdesk API")
        self.APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
        self.APP_DESCRIPTION = os.getenv(
            "APP_DESCRIPTION", "Orders, status updates and sales analytics"
        )

        # ---------- Server ----------
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = _get_int("PORT", 3003)

        # ---------- Database ----------
        self.DATABASE_URL = os.getenv("DATABASE_URL") or self._compose_db_url()
        self.DB_ECHO = _get_bool("DB_ECHO", False)

        # ---------- Logging ----------
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

        # ---------- CORS ----------
        self.CORS_ALLOW_ORIGINS = [
            o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        ]
        self.CORS_ALLOW_CREDENTIALS = _get_bool("CORS_ALLOW_CREDENTIALS", True)
        self.CORS_ALLOW_METHODS = os.getenv("CORS_ALLOW_METHODS", "*")
        self.CORS_ALLOW_HEADERS = os.getenv("CORS_ALLOW_HEADERS", "*")

        # ---------- Analytics ----------
        self.ANALYTICS_DATE_RANGES = parse_date_ranges(
            os.getenv("ANALYTICS_DATE_RANGES", DEFAULT_DATE_RANGES)
        )

    # -------- Internal helpers --------
    def _compose_db_url(self) -> str:
        host = os.getenv("DB_HOST")
        name = os.getenv("DB_NAME")
        user = os.getenv("DB_USER")
        pwd = os.getenv("DB_PASSWORD", "")
        port = os.getenv("DB_PORT", "3306")

        if host and name and user:
            return f"mysql+pymysql://{user}:{pwd}@{host}:{port}/{name}"

        sqlite_path = os.getenv("SQLITE_PATH", "data/orders.db")
        path = Path(sqlite_path)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{path.as_posix()}"


settings = Settings()
