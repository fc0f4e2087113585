"""Validation rules for the auth forms.

Each rule raises `PydanticCustomError` so the message pydantic reports is
exactly the text shown under the field. Every field starts out as an
empty string, so the rules are written against plain `str` values.
"""

import re

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

IDENTIFIER_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = r"^[A-Za-z0-9_-]+$"

_username_re = re.compile(USERNAME_PATTERN)


def _rule_error(kind: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(kind, message)


def check_email(value: str) -> str:
    if not value:
        raise _rule_error("email_required", "Email is required")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise _rule_error("email_invalid", "Invalid email address") from e
    return value


def check_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise _rule_error(
            "password_too_short",
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        )
    return value


class LoginSchema(BaseModel):
    """Login with either an email or a username."""

    email_or_username: str
    password: str

    @field_validator("email_or_username")
    @classmethod
    def identifier_valid(cls, v: str) -> str:
        if not v:
            raise _rule_error("identifier_required", "Email or username is required")
        if len(v) < IDENTIFIER_MIN_LENGTH:
            raise _rule_error(
                "identifier_too_short",
                f"Email or username must be at least {IDENTIFIER_MIN_LENGTH} characters",
            )
        return v

    @field_validator("password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return check_password(v)


class EmailLoginSchema(BaseModel):
    """Login when the service only accepts email sign-in."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return check_password(v)


class SignupSchema(BaseModel):
    name: str
    username: str = ""
    email: str
    password: str
    confirm_password: str

    @field_validator("name")
    @classmethod
    def name_valid(cls, v: str) -> str:
        if not v:
            raise _rule_error("name_required", "Name is required")
        return v

    @field_validator("username")
    @classmethod
    def username_valid(cls, v: str) -> str:
        # Blank means no username
        if not v:
            return v
        if len(v) < USERNAME_MIN_LENGTH:
            raise _rule_error(
                "username_too_short",
                f"Username must be at least {USERNAME_MIN_LENGTH} characters",
            )
        if len(v) > USERNAME_MAX_LENGTH:
            raise _rule_error(
                "username_too_long",
                f"Username must be less than {USERNAME_MAX_LENGTH} characters",
            )
        if not _username_re.match(v):
            raise _rule_error(
                "username_pattern",
                "Username can only contain letters, numbers, underscores, and hyphens",
            )
        return v

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return check_password(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        """Compare against the password as entered.

        A password that failed its own rule is missing from `info.data`, so
        the raw form values are read from the validation context first.
        """
        if not v:
            raise _rule_error("confirm_required", "Please confirm your password")
        raw_values = (info.context or {}).get("values", {})
        password = raw_values.get("password", info.data.get("password"))
        if password is not None and v != password:
            raise _rule_error("password_mismatch", "Passwords don't match")
        return v


class ForgotPasswordSchema(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return check_email(v)
