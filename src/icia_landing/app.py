"""
Flask Application Factory.

Creates and configures the Flask application.
"""

import atexit
import signal
import sys
import threading
from typing import Optional

from flask import Flask

from icia_landing.api import api_bp
from icia_landing.config import Settings, settings as default_settings
from icia_landing.infrastructure.logging import log_request_context, logger
from icia_landing.services.container import EXTENSION_KEY, Services, build_services


def _handle_sigterm(signum: int, frame) -> None:
    """Exit on SIGTERM so atexit hooks close the Mongo client and HTTP session."""
    logger.info(
        "Received SIGTERM, shutting down gracefully",
        extra={"extra_fields": {"signal": signum}}
    )
    sys.exit(0)


# signal.signal only works from the main thread
if threading.current_thread() is threading.main_thread():
    signal.signal(signal.SIGTERM, _handle_sigterm)


def create_app(
    config: Optional[dict] = None,
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Optional Flask configuration dictionary.
        settings: Application settings, defaults to the environment.
        services: Pre-built collaborators, mainly for tests.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)

    app.json.sort_keys = False
    app.json.ensure_ascii = False

    if config:
        app.config.update(config)

    settings = settings or default_settings
    if services is None:
        services = build_services(settings)
        atexit.register(services.close)
    app.extensions[EXTENSION_KEY] = services

    log_request_context(app)

    app.register_blueprint(api_bp)

    logger.info(
        "Application initialized",
        extra={"extra_fields": {
            "environment": services.settings.environment,
            "upstream_configured": services.settings.upstream.is_configured,
            "mongo_configured": services.settings.mongo.is_configured,
        }}
    )

    return app


app = create_app()


if __name__ == "__main__":
    app.run(
        host="0.0.0.0",
        port=default_settings.port,
        debug=default_settings.environment == "development",
    )
