from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from .analytics.controller import register as register_dashboard
from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .common.datetime_utils import now_local, parse_hhmm
from .common.logging_setup import configure_logging
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .database.bootstrap import apply_schema, list_tables, seed_demo_data
from .database.demo_data import generate_demo_data
from .geofence.model import GeofenceConfig
from .insights.client import LLMConfig
from .insights.controller import register as register_insights
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG", None)
    demo_seed = int(getattr(settings, "DEMO_SEED", 42))

    logger.info("Starting with settings=%s", settings_module)

    if db_config and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if db_config and bool(getattr(settings, "AUTO_SEED_DB", False)):
        seed_demo_data(db_config, generate_demo_data(demo_seed, now_local().date()))

    container = build_container(
        db_config=db_config,
        geofence=GeofenceConfig(
            latitude=float(settings.GEOFENCE_LAT),
            longitude=float(settings.GEOFENCE_LNG),
            radius_meters=float(settings.GEOFENCE_RADIUS_M),
            name=str(settings.GEOFENCE_NAME),
        ),
        cutoff=parse_hhmm(settings.CHECKIN_CUTOFF),
        allow_simulation=bool(getattr(settings, "ALLOW_SIMULATED_LOCATION", True)),
        position_timeout_ms=int(settings.POSITION_TIMEOUT_MS),
        llm_config=LLMConfig(
            model=settings.GEMINI_MODEL,
            api_key=getattr(settings, "GEMINI_API_KEY", None),
            timeout=float(settings.LLM_TIMEOUT),
        ),
        demo_seed=demo_seed,
    )
    app.extensions["attendflow"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_dashboard(app, container)
    register_insights(app, container)
    register_audit(app, container)

    @app.route("/healthz", methods=["GET"], endpoint="healthz")
    def healthz():
        return jsonify({"status": "ok", "store": container.store_type})

    return app
