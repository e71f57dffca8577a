# backend/dishooom/config.py
from __future__ import annotations
import os
from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parent


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Seed JSON shipped with the package; point elsewhere for demo data sets
    SEED_DIR = os.environ.get("DISHOOOM_SEED_DIR", str(PACKAGE_DIR / "seed"))
    SEED_ON_STARTUP = True

    # None -> <instance_path>/settings.json
    SETTINGS_PATH = os.environ.get("DISHOOOM_SETTINGS_PATH")

    # Simulated latency per store call (ms). 0 disables it.
    STORE_LATENCY_MS = int(os.environ.get("DISHOOOM_STORE_LATENCY_MS", "0"))

    LOG_LEVEL = os.environ.get("DISHOOOM_LOG_LEVEL", "INFO")

    # Keep record key order in JSON responses
    JSON_SORT_KEYS = False
