"""Environment-driven settings (read lazily so tests can monkeypatch os.environ)."""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

BACKEND_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
PROJECT_ROOT = os.path.dirname(BACKEND_DIR)

DEFAULT_CSV_PATH = os.path.join("data", "Active Listings.csv")
DEFAULT_STATIC_DIR = os.path.join(PROJECT_ROOT, "public")


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip() or default


def listings_csv_path() -> str:
    path = _env("LISTINGS_CSV_PATH", DEFAULT_CSV_PATH) or DEFAULT_CSV_PATH
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


def static_dir() -> str:
    return _env("STATIC_DIR", DEFAULT_STATIC_DIR) or DEFAULT_STATIC_DIR
