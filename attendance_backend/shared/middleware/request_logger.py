# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import secrets
import time

from flask import Flask, Response, g, request

from attendance_backend.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_RE = re.compile(r"^[\w.-]{1,64}$")
_CREDENTIAL_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})
_AUTH_REJECTIONS = frozenset({401, 403, 429})


def _client_ip() -> str:
    return request.remote_addr or "unknown"


def _incoming_request_id() -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(supplied):
        return supplied
    return secrets.token_urlsafe(8)


def _header_summary() -> dict[str, str]:
    return {
        key: ("<present>" if key.lower() in _CREDENTIAL_HEADERS else value)
        for key, value in request.headers.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    @app.before_request
    def _before_request() -> None:
        set_correlation_id(_incoming_request_id())
        g.request_start_time = time.perf_counter()
        if debug_mode:
            logger.debug(
                f"-> {request.method} {request.path} from {_client_ip()} "
                f"args={sorted(request.args)} headers={_header_summary()} "
                f"body_size={request.content_length or 0}"
            )

    @app.after_request
    def _after_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_start_time", time.perf_counter())) * 1000
        line = (
            f"{request.method} {request.path} -> {response.status_code} "
            f"in {elapsed_ms:.1f} ms from {_client_ip()}"
        )
        if response.status_code in _AUTH_REJECTIONS:
            logger.warning(line)
        else:
            logger.info(line)
        response.headers.setdefault(REQUEST_ID_HEADER, get_correlation_id())
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()
