from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from blogger.shared.errors.validation_types import ValidationErrorType


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not re.match(r'^[a-zA-Z0-9]+$', value):
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID_CHARS,
                "Username must contain only ASCII letters and digits",
                {"pattern": "^[a-zA-Z0-9]+$"}
            )

        if not value[0].isalpha():
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID_CHARS,
                "Username must start with a letter",
                {"pattern": "^[a-zA-Z][a-zA-Z0-9]*$"}
            )

        return value

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Za-z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_LETTER,
                "Password must contain at least one letter",
                {}
            )

        if not re.search(r"\d", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_DIGIT,
                "Password must contain at least one digit",
                {}
            )

        return value


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login


class UserDTO(BaseModel):
    id: int
    username: str


class ProfileDTO(BaseModel):
    id: int
    username: str
    iat: int | None = None
