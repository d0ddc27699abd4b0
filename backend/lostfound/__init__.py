import logging
import os
from typing import Any, Mapping

from flask import Flask, send_from_directory, abort
from .config import get_config
from .extensions import db, migrate, cors
from sqlalchemy import text
from dotenv import load_dotenv
from werkzeug.middleware.proxy_fix import ProxyFix


def create_app(config_name: str | None = None, overrides: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Ensure .env is loaded before reading env vars
    load_dotenv()
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Honor proxy headers from Nginx for correct url_for(_external=True) scheme/host
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)  # type: ignore[assignment]

    # Init extensions
    cors.init_app(app)
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(__file__), "..", "migrations"))

    from . import models  # noqa: F401  register mappers for migrations
    from .errors import register_error_handlers
    from .modules.notifications.bus import Broadcaster
    from .security import init_identity

    app.extensions["broadcaster"] = Broadcaster()
    init_identity(app)
    register_error_handlers(app)

    # Register blueprints (v1 API)
    from .apis.v1 import register_api
    register_api(app)

    from .cli import register_cli
    register_cli(app)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/db-check")
    def db_check():
        try:
            db.session.execute(text("SELECT 1"))
            return {"db": "ok"}
        except Exception:
            app.logger.exception("Database check failed")
            return {"db": "error"}, 500

    # Ensure upload folder exists and serve uploads
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    @app.get("/uploads/<path:filename>")
    def uploads(filename: str):
        base = app.config["UPLOAD_FOLDER"]
        if os.path.isfile(os.path.join(base, filename)):
            return send_from_directory(base, filename)
        abort(404)

    return app
