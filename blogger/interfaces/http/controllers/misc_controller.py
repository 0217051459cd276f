# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, jsonify, send_from_directory
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from blogger.infrastructure.health import check_database


class MiscController:
    def __init__(self, *, engine: Engine, uploads_dir: Path | None = None) -> None:
        self._engine = engine
        self._uploads_dir = uploads_dir

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        if self._uploads_dir is not None:
            bp.add_url_rule("/uploads/<path:name>", view_func=self.uploads, methods=["GET"])
        return bp

    def index(self):
        return "Server running"

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database(self._engine)
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            status["ok"] = False
            status["database"] = f"error: {type(exc).__name__}"
        return jsonify(status), 200 if status["ok"] else 503

    def uploads(self, name: str):
        assert self._uploads_dir is not None
        return send_from_directory(self._uploads_dir.resolve(), name)
