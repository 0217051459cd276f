# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from blogger.application.use_cases.users.login_user import LoginUserUseCase
from blogger.application.use_cases.users.register_user import \
    RegisterUserUseCase
from blogger.domain.users.repositories import TokenService
from blogger.infrastructure.audit import AuditAction, audit_log
from blogger.interfaces.http.dto.auth import (LoginRequestDTO, ProfileDTO,
                                              RegisterRequestDTO, UserDTO)
from blogger.interfaces.http.session import client_ip, read_token
from blogger.shared.config import SecurityConfig
from blogger.shared.errors.validation import raise_validation_error
from blogger.shared.logging import logger
from blogger.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        tokens: TokenService,
        security: SecurityConfig,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._tokens = tokens
        self._security = security

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.username, dto.password)

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=client_ip(),
            details={"username": dto.username},
            success=True,
        )

        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(UserDTO(id=user.id, username=user.username).model_dump()), 200

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()

        try:
            user, token = self._login_use_case.execute(dto.username, dto.password)
        except Exception as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                user_id=None,
                ip_address=ip_address,
                details={"username": dto.username, "error": type(exc).__name__},
                success=False,
            )
            raise

        g.user_id = user.id
        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            ip_address=ip_address,
            details={"username": dto.username},
            success=True,
        )

        response = jsonify(UserDTO(id=user.id, username=user.username).model_dump())
        response.set_cookie(
            self._security.cookie_name,
            token,
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )
        logger.info(f"auth.login: ok user_id={user.id}")
        return response, 200

    def profile(self) -> tuple[Response, int]:
        identity = self._tokens.verify(read_token(self._security.cookie_name))
        g.user_id = identity.user_id
        issued_at = int(identity.issued_at.timestamp()) if identity.issued_at else None
        payload = ProfileDTO(id=identity.user_id, username=identity.username, iat=issued_at)
        return jsonify(payload.model_dump()), 200

    def logout(self) -> tuple[Response, int]:
        audit_log(
            AuditAction.LOGOUT,
            user_id=None,
            ip_address=client_ip(),
            details={},
            success=True,
        )

        response = jsonify({"ok": True})
        response.delete_cookie(
            self._security.cookie_name,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )
        logger.info("auth.logout: ok")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/profile", view_func=self.profile, methods=["GET"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        return bp
