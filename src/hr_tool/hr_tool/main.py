from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .leaves.controller import register as register_leaves
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run the API over already-wired services (tests);
    otherwise repositories are built from the settings module's DB_CONFIG.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
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
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, mail_config=getattr(settings, "MAIL_CONFIG", None))

        admin_email = getattr(settings, "ADMIN_EMAIL", None)
        admin_password = getattr(settings, "ADMIN_PASSWORD", None)
        if admin_email and admin_password:
            container.user_service.ensure_admin(email=admin_email, password=admin_password)

    register_users(app, container)
    register_leaves(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
