# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import atexit

from flask import Flask, Response

from authgate.container import Container
from authgate.domain.users.entities import Token
from authgate.infrastructure.db import init_db
from authgate.shared.config import AppConfig, load_config
from authgate.shared.logging import logger
from authgate.shared.middleware.error_handler import configure_error_handling
from authgate.shared.middleware.request_logger import configure_request_logging
from authgate.shared.middleware.security_headers import configure_security_headers


def _secured(token: Token) -> Response:
    return Response(token.value, mimetype="application/octet-stream")


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or load_config()
    container = container or Container(config)
    init_db(container.engine)

    app = Flask(__name__)
    app.extensions["authgate"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_security_headers(app, enable_hsts=config.server.enable_hsts)

    app.register_blueprint(container.auth_controller.as_blueprint(config.auth.prefix))
    app.add_url_rule(
        "/secured",
        endpoint="secured",
        view_func=container.auth_filter.protect(_secured),
    )

    if config.auth.reap_interval_seconds > 0:
        container.token_reaper.start()
        atexit.register(container.token_reaper.stop)

    logger.info(f"Flask app initialized, auth routes under {config.auth.prefix or '/'}")
    return app
