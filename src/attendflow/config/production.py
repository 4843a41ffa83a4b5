import os

from .base import *  # noqa: F401,F403
from .base import db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

# Real deployments should refuse off-campus or missing positions.
ALLOW_SIMULATED_LOCATION = env_flag("ALLOW_SIMULATED_LOCATION", "0")
