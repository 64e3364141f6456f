from __future__ import annotations

import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .common.logging_utils import configure_logging, get_logger
from .container import Container, build_container
from .core.constants import DEFAULT_TOKEN_TTL_HOURS
from .database.bootstrap import apply_schema, ensure_admin, list_tables
from .groups.controller import register as register_groups
from .meetings.controller import register as register_meetings
from .memberships.controller import register as register_memberships
from .persons.controller import register as register_persons

logger = get_logger(__name__)


def _jwt_secret(settings, settings_module: str) -> str:
    secret = getattr(settings, "JWT_SECRET", None)
    if not secret:
        raise RuntimeError(f"JWT_SECRET (or SECRET_KEY) must be set for {settings_module}")
    return secret


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a ready container (e.g. in-memory repositories in tests) to skip the
    database wiring entirely.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(
            db_config=db_config,
            jwt_secret=_jwt_secret(settings, settings_module),
            token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", DEFAULT_TOKEN_TTL_HOURS)),
        )
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            logger.info("Schema ready (tables=%s)", len(list_tables(container.conn)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_admin(
                container.conn,
                email=getattr(settings, "ADMIN_EMAIL"),
                password=getattr(settings, "ADMIN_PASSWORD"),
            )

    app.extensions["container"] = container

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_error_handlers(app)
    register_persons(app, container)
    register_groups(app, container)
    register_memberships(app, container)
    register_meetings(app, container)
    register_attendance(app, container)

    return app
