# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Request, request

from attendance_backend.domain.users import ClientInfo


def get_client_ip(req: Request | None = None) -> str | None:
    # Forwarded headers reach remote_addr only through ProxyFix (TRUSTED_PROXY_COUNT).
    req = req or request
    return req.remote_addr


def get_client_info(req: Request | None = None) -> ClientInfo:
    req = req or request
    return ClientInfo(
        ip_address=get_client_ip(req),
        user_agent=req.headers.get("User-Agent", ""),
        platform=(req.headers.get("Sec-CH-UA-Platform") or "unknown").strip('"'),
    )


def get_bearer_token(req: Request | None = None) -> str | None:
    req = req or request
    auth_header = req.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None
