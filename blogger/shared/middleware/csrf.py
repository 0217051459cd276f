# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from functools import wraps

from flask import Flask, current_app, jsonify, request

from blogger.shared.config import SecurityConfig

SAFE_METHODS: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
CSRF_ENABLED = "CSRF_ENABLED"


def configure_csrf(app: Flask, security: SecurityConfig) -> None:
    app.config[CSRF_ENABLED] = security.enable_csrf
    if not security.enable_csrf:
        return

    @app.after_request
    def _ensure_csrf_cookie(resp):
        if request.method in SAFE_METHODS:
            token = request.cookies.get("csrf_token", "")
            if not token:
                resp.set_cookie(
                    "csrf_token",
                    secrets.token_urlsafe(32),
                    httponly=False,
                    samesite=security.cookie_samesite,
                    secure=security.cookie_secure,
                    max_age=60 * 60 * 24 * 7,
                )
        return resp


def csrf_protect(f: Callable):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not current_app.config.get(CSRF_ENABLED, False):
            return f(*args, **kwargs)
        if request.method in SAFE_METHODS:
            return f(*args, **kwargs)
        header = (request.headers.get("X-CSRF-Token") or "").strip()
        cookie = (request.cookies.get("csrf_token") or "").strip()
        if not header or not cookie or not secrets.compare_digest(header, cookie):
            return jsonify({"error": "csrf"}), 403
        return f(*args, **kwargs)

    return wrapper


__all__ = ["configure_csrf", "csrf_protect"]
