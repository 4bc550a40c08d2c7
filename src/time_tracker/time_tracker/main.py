from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .timelogs.controller import register as register_timelogs

logger = logging.getLogger(__name__)

# Repository root; the app runs from a source checkout.
REPO_ROOT = Path(__file__).resolve().parents[3]
SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    hours_policy = getattr(settings, "HOURS_POLICY", "break_subtraction")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info(
        "Starting with settings=%s db=%s@%s:%s/%s policy=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        hours_policy,
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, hours_policy=hours_policy)
    register_timelogs(app, container)

    return app
