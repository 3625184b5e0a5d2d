from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .activity.controller import register as register_activity
from .attendance.controller import register as register_attendance
from .badges.controller import register as register_badges
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .members.controller import register as register_members
from .months.controller import register as register_months
from .web.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db_config = dict(getattr(settings, "DB_CONFIG", {}))
    store_backend = getattr(settings, "STORE_BACKEND", "mysql")
    logger.info(
        "settings=%s store=%s db=%s@%s:%s/%s",
        settings_module,
        store_backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            store_backend=store_backend,
            cache_ttl_seconds=float(getattr(settings, "CACHE_TTL_SECONDS", 120)),
            ready_retries=int(getattr(settings, "READY_RETRIES", 5)),
            ready_backoff_seconds=float(getattr(settings, "READY_BACKOFF_SECONDS", 1.0)),
        )

    app.extensions["church_attendance"] = container

    register_error_handlers(app)
    register_months(app, container)
    register_members(app, container)
    register_attendance(app, container)
    register_badges(app, container)
    register_activity(app, container)

    return app
