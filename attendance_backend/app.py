# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, Response
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from attendance_backend.infrastructure.container import Container
from attendance_backend.shared.config import AppConfig, load_config
from attendance_backend.shared.logging import logger, setup_logging
from attendance_backend.shared.middleware.error_handler import configure_error_handling
from attendance_backend.shared.middleware.rate_limit import configure_rate_limit
from attendance_backend.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    config = config or load_config()
    container = container or Container(config)
    setup_logging(debug_mode=config.debug_logging)

    app = Flask(__name__)
    if config.security.trusted_proxy_count:
        proxies = config.security.trusted_proxy_count
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxies, x_proto=proxies)  # type: ignore[method-assign]
    app.extensions["container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_rate_limit(app, config.security)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    container.devadmin_guard.init_app(app)
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.devadmin_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        # Session-bearing responses must never be cached by intermediaries.
        resp.headers.setdefault("Cache-Control", "no-store")

        return resp

    logger.info(
        f"Flask app initialized env={config.app_env} "
        f"devadmin_configured={container.credential_validator.is_configured()}"
    )
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)
