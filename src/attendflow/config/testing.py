from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

# Tests always run against the in-memory store.
DB_CONFIG = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

ALLOW_SIMULATED_LOCATION = True
GEMINI_API_KEY = None
LOG_LEVEL = "WARNING"
DEMO_SEED = 7
