# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request

from blogger.application.use_cases.posts.post_authoring import \
    PostAuthoringWorkflow
from blogger.domain.posts.entities import CoverUpload, PostDraft
from blogger.infrastructure.audit import AuditAction, audit_log
from blogger.interfaces.http.dto.posts import PostDTO
from blogger.interfaces.http.session import client_ip, read_token
from blogger.shared.config import SecurityConfig
from blogger.shared.errors import ValidationError
from blogger.shared.errors.validation import field_errors
from blogger.shared.errors.validation_types import ValidationErrorType
from blogger.shared.middleware.csrf import csrf_protect
from blogger.utils.asyncio_utils import run_async


def _draft_from_form() -> PostDraft:
    return PostDraft(
        title=request.form.get("title", ""),
        summary=request.form.get("summary", ""),
        content=request.form.get("content", ""),
    )


def _upload_from_form() -> CoverUpload | None:
    file = request.files.get("file")
    if file is None or not file.filename:
        return None
    return CoverUpload(data=file.read(), mime_type=file.mimetype or "")


def _post_id_from_form() -> int:
    raw = request.form.get("id", "")
    try:
        return int(raw)
    except ValueError:
        kind = ValidationErrorType.NOT_INTEGER if raw else ValidationErrorType.MISSING
        raise ValidationError(context=field_errors({"id": kind})) from None


class PostsController:
    def __init__(self, *, workflow: PostAuthoringWorkflow, security: SecurityConfig) -> None:
        self._workflow = workflow
        self._security = security

    def _token(self) -> str | None:
        return read_token(self._security.cookie_name)

    @csrf_protect
    def create(self) -> tuple[Response, int]:
        view = run_async(
            self._workflow.create(self._token(), _draft_from_form(), _upload_from_form())
        )
        g.user_id = view.post.author_id
        audit_log(
            AuditAction.POST_CREATED,
            user_id=view.post.author_id,
            ip_address=client_ip(),
            details={"post_id": view.post.id},
        )
        return jsonify(PostDTO.from_view(view).to_json()), 200

    @csrf_protect
    def update(self) -> tuple[Response, int]:
        post_id = _post_id_from_form()
        view = run_async(
            self._workflow.update(
                self._token(), post_id, _draft_from_form(), _upload_from_form()
            )
        )
        g.user_id = view.post.author_id
        audit_log(
            AuditAction.POST_UPDATED,
            user_id=view.post.author_id,
            ip_address=client_ip(),
            details={"post_id": post_id},
        )
        return jsonify(PostDTO.from_view(view).to_json()), 200

    @csrf_protect
    def delete(self, post_id: int) -> tuple[Response, int]:
        run_async(self._workflow.delete(self._token(), post_id))
        audit_log(
            AuditAction.POST_DELETED,
            user_id=None,
            ip_address=client_ip(),
            details={"post_id": post_id},
        )
        return jsonify({"ok": True}), 200

    def list_recent(self) -> tuple[Response, int]:
        views = self._workflow.list_recent()
        return jsonify([PostDTO.from_view(v).to_json() for v in views]), 200

    def get(self, post_id: int) -> tuple[Response, int]:
        return jsonify(PostDTO.from_view(self._workflow.get(post_id)).to_json()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("posts", __name__)
        bp.add_url_rule("/post", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/post", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/post", view_func=self.list_recent, methods=["GET"])
        bp.add_url_rule("/post/<int:post_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/post/<int:post_id>", view_func=self.delete, methods=["DELETE"])
        return bp
