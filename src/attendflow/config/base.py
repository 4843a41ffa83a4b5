"""Settings shared by every environment, read from the process environment."""

import os


def env_flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env():
    # No DB_HOST means demo mode with the in-memory store.
    if not os.getenv("DB_HOST"):
        return None
    return {
        "host": os.getenv("DB_HOST"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "attendflow_db"),
    }


GEOFENCE_NAME = os.getenv("GEOFENCE_NAME", "Main Campus")
GEOFENCE_LAT = float(os.getenv("GEOFENCE_LAT", "37.7749"))
GEOFENCE_LNG = float(os.getenv("GEOFENCE_LNG", "-122.4194"))
GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "2000"))

CHECKIN_CUTOFF = os.getenv("CHECKIN_CUTOFF", "08:00")
POSITION_TIMEOUT_MS = int(os.getenv("POSITION_TIMEOUT_MS", "5000"))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or None
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEMO_SEED = int(os.getenv("DEMO_SEED", "42"))
