# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import importlib
from typing import Any, Protocol, cast

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from apistarter.infrastructure.container import Container
from apistarter.infrastructure.db import init_db
from apistarter.shared.config import AppConfig, load_config
from apistarter.shared.logging import logger, setup_logging
from apistarter.shared.middleware.error_handler import configure_error_handling
from apistarter.shared.middleware.rate_limit import configure_rate_limiting
from apistarter.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    config = config or load_config()
    container = container or Container(config)

    setup_logging(config.log_level, config.log_file, json_logs=config.is_production())
    init_db(container.engine)

    app = Flask(__name__)
    app.extensions["container"] = container

    hops = config.security.trusted_proxy_hops
    if hops:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)  # type: ignore[method-assign]

    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_error_handling(app, config)
    configure_rate_limiting(app, container.general_rate_limiter)

    cors_kwargs: dict[str, object] = {
        "resources": {rf"{config.api_prefix.rstrip('/')}/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    base_path = config.api_base_path
    app.register_blueprint(container.health_controller.as_blueprint(base_path))
    app.register_blueprint(container.users_controller.as_blueprint(base_path))

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized env={config.app_env} base_path={base_path}")
    return app


if __name__ == "__main__":
    _config = load_config()
    create_app(_config).run(host="0.0.0.0", port=_config.port, debug=not _config.is_production())
