# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    MISSING = "missing"
    BLANK = "blank"
    TOO_LONG = "too_long"
    USERNAME_INVALID_CHARS = "username_invalid_chars"
    NOT_INTEGER = "not_integer"
    PASSWORD_NO_LETTER = "password_no_letter"
    PASSWORD_NO_DIGIT = "password_no_digit"
    COVER_NOT_IMAGE = "cover_not_image"
    COVER_EMPTY = "cover_empty"


__all__ = ["ValidationErrorType"]
