"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_GEOFENCE_NAME = "Main Campus"
DEFAULT_GEOFENCE_LAT = 37.7749
DEFAULT_GEOFENCE_LNG = -122.4194
DEFAULT_GEOFENCE_RADIUS_M = 2000.0

DEFAULT_CHECKIN_CUTOFF = time(8, 0)
DEFAULT_POSITION_TIMEOUT_MS = 5000
STREAM_KEEPALIVE_SECONDS = 15.0

ALL_USERS = "ALL"

DEFAULT_RECENT_LOGS_LIMIT = 100
INSIGHTS_SAMPLE_RECORDS = 30
INSIGHTS_RECENT_LOGS = 10
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_LLM_TIMEOUT = 30.0

DEMO_HISTORY_DAYS = 60
