"""
Input validation for user and post mutations.

Problems are collected into a list rather than failing on the first one, so a
client sees every invalid field in a single response.
"""

from __future__ import annotations

from uuid import UUID

from email_validator import EmailNotValidError, validate_email

from ..errors import NotFound, ValidationFailed

MIN_PASSWORD_LENGTH = 5


def is_email(value: str | None) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_empty(value: str | None) -> bool:
    return value is None or value == ""


def validate_user_fields(email: str, name: str, password: str) -> None:
    """Validate registration / profile fields.

    Raises:
        ValidationFailed: with one message per invalid field
    """
    errors: list[dict[str, str]] = []
    if not is_email(email):
        errors.append({"message": "E-Mail is invalid."})
    if is_empty(name):
        errors.append({"message": "Name can not be empty!"})
    if is_empty(password) or len(password) < MIN_PASSWORD_LENGTH:
        errors.append({"message": "Password too short!"})
    if errors:
        raise ValidationFailed(errors)


def validate_post_fields(title: str, content: str, post_status: str) -> None:
    """All three post fields are required."""
    if is_empty(title) or is_empty(content) or is_empty(post_status):
        raise ValidationFailed([{"message": "Please fill all inputs!"}])


def parse_id(value: str | UUID, not_found_message: str) -> UUID:
    """Parse a client-supplied identifier.

    A malformed id can never match a record, so it is reported as NotFound.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as e:
        raise NotFound(not_found_message) from e
