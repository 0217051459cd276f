from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask
from loguru import logger as loguru_logger

from blogger.application.use_cases.users.login_user import LoginUserUseCase
from blogger.application.use_cases.users.register_user import \
    RegisterUserUseCase
from blogger.domain.users.entities import User
from blogger.domain.users.exceptions import InvalidCredentialsError
from blogger.infrastructure.auth import JwtTokenService
from blogger.interfaces.http.controllers.auth_controller import AuthController
from blogger.shared.config import SecurityConfig
from blogger.shared.middleware.error_handler import configure_error_handling
from blogger.shared.middleware.rate_limit import RATE_LIMIT_ENABLED
from blogger.shared.middleware.request_logger import configure_request_logging

TOKENS = JwtTokenService("test-secret-0123456789abcdef0123456789")


def _user(username: str = "alice") -> User:
    return User(id=1, username=username, password_hash="hash", created_at=datetime.now(UTC))


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    app.config[RATE_LIMIT_ENABLED] = False
    configure_error_handling(app)
    return app


def _controller(**overrides) -> AuthController:
    kwargs = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "tokens": TOKENS,
        "security": SecurityConfig(),
    }
    kwargs.update(overrides)
    return AuthController(**kwargs)


def test_register_endpoint_returns_user(flask_app: Flask) -> None:
    register_called: dict[str, tuple[str, str]] = {}

    class StubRegister:
        def execute(self, username: str, password: str) -> User:
            register_called["args"] = (username, password)
            return _user(username)

    controller = _controller(register_use_case=cast(RegisterUserUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/register", json={"username": "alice", "password": "secret123"})

    assert response.status_code == 200
    assert register_called["args"] == ("alice", "secret123")
    assert response.get_json() == {"id": 1, "username": "alice"}
    assert "Set-Cookie" not in response.headers


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "alice", "password": "short1"},
        {"username": "alice", "password": "lettersonly"},
        {"username": "1alice", "password": "secret123"},
        {"username": "al ice", "password": "secret123"},
        {"username": "alice"},
    ],
)
def test_register_rejects_invalid_payload(flask_app: Flask, payload: dict) -> None:
    register = MagicMock()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/register", json=payload)

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"
    register.execute.assert_not_called()


def test_login_sets_token_cookie(flask_app: Flask) -> None:
    class StubLogin:
        def execute(self, username: str, password: str) -> tuple[User, str]:
            return _user(username), "jwt-value"

    controller = _controller(login_use_case=cast(LoginUserUseCase, StubLogin()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/login", json={"username": "alice", "password": "secret123"})

    assert response.status_code == 200
    assert response.get_json() == {"id": 1, "username": "alice"}
    assert response.headers["Set-Cookie"].startswith("token=jwt-value")


def test_login_invalid_credentials_returns_400(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/login", json={"username": "alice", "password": "nope"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_credentials"


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/login", json={"username": "a"})

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"


def test_profile_reads_cookie_then_bearer(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())
    token = TOKENS.issue(1, "alice")

    with flask_app.test_client() as client:
        by_header = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        client.set_cookie("token", token)
        by_cookie = client.get("/profile")

    for response in (by_header, by_cookie):
        assert response.status_code == 200
        body = response.get_json()
        assert body["id"] == 1
        assert body["username"] == "alice"
        assert isinstance(body["iat"], int)


def test_profile_without_token_is_unauthorized(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/profile")

    assert response.status_code == 401
    assert response.get_json()["error"] == "unauthorized"


def test_logout_clears_cookie(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("token", "something")
        response = client.post("/logout")

        assert response.status_code == 200
        assert client.get_cookie("token") is None


def test_request_log_records_verified_user(flask_app: Flask) -> None:
    configure_request_logging(flask_app, debug_mode=True)
    flask_app.register_blueprint(_controller().as_blueprint())
    messages: list[str] = []
    handler_id = loguru_logger.add(messages.append, format="{message}")
    try:
        with flask_app.test_client() as client:
            response = client.get(
                "/profile", headers={"Authorization": f"Bearer {TOKENS.issue(7, 'alice')}"}
            )
    finally:
        loguru_logger.remove(handler_id)

    assert response.status_code == 200
    completed = [m for m in messages if m.startswith("Request completed")]
    assert completed and "user=7" in completed[-1]
