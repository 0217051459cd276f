# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import importlib
from typing import Any, Protocol, cast

from flask import Flask

from blogger.infrastructure.container import Container
from blogger.infrastructure.db import init_db
from blogger.shared.config import AppConfig, load_config
from blogger.shared.logging import logger, setup_logging
from blogger.shared.middleware.csrf import configure_csrf
from blogger.shared.middleware.error_handler import configure_error_handling
from blogger.shared.middleware.rate_limit import (RATE_LIMIT_ENABLED,
                                                  RATE_LIMIT_REQUESTS,
                                                  RATE_LIMIT_WINDOW)
from blogger.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    setup_logging("DEBUG" if config.debug_logging else None)
    init_db(container.engine)

    app = Flask(__name__)
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_csrf(app, config.security)

    configure_request_logging(app, debug_mode=config.debug_logging)

    app.config.update(
        SECRET_KEY=config.secret_key,
        MAX_CONTENT_LENGTH=config.posts.max_upload_bytes,
    )
    app.config[RATE_LIMIT_ENABLED] = config.security.enable_rate_limit
    app.config[RATE_LIMIT_REQUESTS] = config.security.rate_limit_requests
    app.config[RATE_LIMIT_WINDOW] = config.security.rate_limit_window

    cors_kwargs: dict[str, object] = {
        "resources": {r"/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.posts_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        # covers are fetched cross-origin by the frontend
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "cross-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if config.is_production() and config.security.cookie_secure:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    app.extensions["container"] = container
    logger.info(f"Flask app initialized asset_backend={config.assets.backend}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=4000, debug=True)
