from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .accounting.controller import register as register_accounting
from .adjustments.controller import register as register_adjustments
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_EXPECTED_DAILY_MINUTES, DEFAULT_PROGRESS_CAP_PERCENT, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .punches.controller import register as register_punches
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing a ready ``container`` skips every database step (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)

        container = build_container(
            db_config=db_config,
            timezone_name=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
            default_expected_minutes=int(getattr(settings, "DEFAULT_EXPECTED_DAILY_MINUTES", DEFAULT_EXPECTED_DAILY_MINUTES)),
            progress_cap=int(getattr(settings, "PROGRESS_CAP_PERCENT", DEFAULT_PROGRESS_CAP_PERCENT)),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_punches(app, container)
    register_accounting(app, container)
    register_adjustments(app, container)

    return app
