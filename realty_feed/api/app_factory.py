"""Flask application factory."""

from __future__ import annotations

import logging
from flask import Flask
from flask_cors import CORS
from redis import Redis
from rq import Queue

from ..config import APP_CONFIG, DATABASE_CONFIG, QUEUE_CONFIG
from ..storage import build_engine, session_factory
from .routes import api_bp

logger = logging.getLogger(__name__)


def create_app(*, database_url: str | None = None) -> Flask:
    """Create and configure the Flask application."""

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = APP_CONFIG.max_upload_bytes
    app.config["DATABASE_URL"] = database_url or DATABASE_CONFIG.url

    CORS(app)
    app.register_blueprint(api_bp, url_prefix="/api")

    engine = build_engine(app.config["DATABASE_URL"])
    app.extensions["db"] = {"engine": engine, "sessions": session_factory(engine)}

    redis_connection = Redis.from_url(QUEUE_CONFIG.redis_url)
    queue = Queue(
        name=QUEUE_CONFIG.queue_name,
        connection=redis_connection,
        default_timeout=QUEUE_CONFIG.default_timeout,
    )
    app.extensions["rq"] = {"queue": queue, "connection": redis_connection}

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    logger.info("Flask application initialised")
    return app
