from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .common.logging_setup import configure_logging
from .container import STORAGE_MYSQL, build_container
from .database.bootstrap import apply_schema, ensure_demo_students, list_tables
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ENABLE_SEED_ENDPOINT"] = bool(getattr(settings, "ENABLE_SEED_ENDPOINT", False))
    app.json.sort_keys = False

    storage_backend = str(getattr(settings, "STORAGE_BACKEND", STORAGE_MYSQL)).lower()
    db_config = dict(getattr(settings, "DB_CONFIG", {}) or {})
    app.config["STORAGE_BACKEND"] = storage_backend

    if storage_backend == STORAGE_MYSQL:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_students(db_config)
    else:
        logger.info("settings=%s storage=%s", settings_module, storage_backend)

    container = build_container(db_config=db_config, storage_backend=storage_backend)
    app.extensions["vision.container"] = container

    if storage_backend != STORAGE_MYSQL and bool(getattr(settings, "AUTO_SEED_DB", False)):
        container.roster_service.seed_demo_students()

    register_error_handlers(app)
    register_roster(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "storage": container.storage_backend})

    return app
