from __future__ import annotations

import pytest

from blogger.application.services.password_hashing import \
    WerkzeugPasswordHasher
from blogger.application.use_cases.users.login_user import LoginUserUseCase
from blogger.application.use_cases.users.register_user import RegisterUserUseCase
from blogger.domain.users.entities import User
from blogger.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from blogger.domain.users.repositories import PasswordHasher, UserRepository
from blogger.infrastructure.auth import JwtTokenService


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1

    def find_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    def find_by_id(self, user_id: int) -> User | None:
        return next((u for u in self._users.values() if u.id == user_id), None)

    def add(self, user: User) -> User:
        new_user = User(
            id=self._seq,
            username=user.username,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )
        self._seq += 1
        self._users[new_user.username] = new_user
        return new_user


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens() -> JwtTokenService:
    return JwtTokenService("test-secret-0123456789abcdef0123456789")


def test_register_user_success(users: InMemoryUserRepository) -> None:
    use_case = RegisterUserUseCase(users=users, password_hasher=DeterministicHasher())

    user = use_case.execute("alice", "secret123")

    assert user.id == 1
    assert user.username == "alice"
    assert users.find_by_username("alice").password_hash == "hashed:secret123"


def test_register_user_duplicate_raises(users: InMemoryUserRepository) -> None:
    use_case = RegisterUserUseCase(users=users, password_hasher=DeterministicHasher())
    use_case.execute("alice", "secret123")

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("alice", "other123")


def test_login_user_success_issues_verifiable_token(
    users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    RegisterUserUseCase(users=users, password_hasher=DeterministicHasher()).execute(
        "alice", "secret123"
    )
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=DeterministicHasher())

    user, token = login.execute("alice", "secret123")

    identity = tokens.verify(token)
    assert (identity.user_id, identity.username) == (user.id, "alice")


@pytest.mark.parametrize(("username", "password"), [("alice", "wrong123"), ("nobody", "secret123")])
def test_login_user_invalid_credentials(
    users: InMemoryUserRepository, tokens: JwtTokenService, username: str, password: str
) -> None:
    RegisterUserUseCase(users=users, password_hasher=DeterministicHasher()).execute(
        "alice", "secret123"
    )
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=DeterministicHasher())

    with pytest.raises(InvalidCredentialsError):
        login.execute(username, password)


def test_werkzeug_hasher_round_trip() -> None:
    hasher = WerkzeugPasswordHasher()
    hashed = hasher.hash("secret123")

    assert hashed != "secret123"
    assert hasher.verify("secret123", hashed)
    assert not hasher.verify("secret124", hashed)
    assert not hasher.verify("secret123", "")
