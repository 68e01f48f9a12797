"""
Field rules for an author.

Each validator takes a raw value and returns the cleaned value, or raises
AuthorValidationError naming the field and the kind of violation. The same
functions back AuthorRecord's setters and the request schemas.
"""
import re
import uuid
from typing import Final

from email_validator import EmailNotValidError, validate_email as _validate_email

from authors_api.core.config import get_settings
from authors_api.core.exceptions import AuthorValidationError, ValidationKind
from authors_api.utils.sanitize import sanitize_string
from authors_api.utils.validate_uuid import validate_uuid

AVATAR_URL_MAX_LENGTH: Final[int] = 255
EMAIL_MAX_LENGTH: Final[int] = 128
USERNAME_MAX_LENGTH: Final[int] = 32
# $argon2id$v=19$m=65536,t=3,p=4$ + 22 char salt + $ + 43 char digest
PASSWORD_HASH_LENGTH: Final[int] = 97

_ARGON2_HASH: Final[re.Pattern[str]] = re.compile(
    r"^\$argon2(?:id|i|d)\$v=\d+\$m=\d+,t=\d+,p=\d+\$[A-Za-z0-9+/]+\$[A-Za-z0-9+/]+$"
)
_HEX: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]+$")


def _require_str(field: str, value: object) -> str:
    if not isinstance(value, str):
        raise AuthorValidationError(
            field, ValidationKind.INVALID_FORMAT, f"{field} must be a string"
        )
    return value


def validate_author_id(value: object) -> uuid.UUID:
    try:
        return validate_uuid(value)
    except ValueError as e:
        raise AuthorValidationError(
            "author_id", ValidationKind.INVALID_IDENTIFIER, str(e)
        ) from e


def validate_avatar_url(value: object) -> str:
    avatar_url = sanitize_string(_require_str("avatar_url", value))
    if len(avatar_url) > AVATAR_URL_MAX_LENGTH:
        raise AuthorValidationError(
            "avatar_url", ValidationKind.TOO_LARGE, "avatar url too large"
        )
    return avatar_url


def validate_activation_token(value: object, length: int | None = None) -> str | None:
    """None means no activation is pending."""
    if value is None:
        return None
    if length is None:
        length = get_settings().ACTIVATION_TOKEN_LENGTH

    token = _require_str("activation_token", value).strip().lower()
    if not _HEX.match(token):
        raise AuthorValidationError(
            "activation_token",
            ValidationKind.INVALID_FORMAT,
            "activation token must contain only hexadecimal digits",
        )
    if len(token) != length:
        raise AuthorValidationError(
            "activation_token",
            ValidationKind.INVALID_FORMAT,
            f"activation token must be {length} characters",
        )
    return token


def validate_email(value: object) -> str:
    email = _require_str("email", value).strip()
    try:
        email = _validate_email(email, check_deliverability=False).normalized
        # uniqueness is case-insensitive on the whole address
        email = email.lower()
    except EmailNotValidError as e:
        raise AuthorValidationError(
            "email", ValidationKind.EMPTY_OR_INSECURE, f"email is empty or insecure: {e}"
        ) from e

    if len(email) > EMAIL_MAX_LENGTH:
        raise AuthorValidationError("email", ValidationKind.TOO_LARGE, "email too large")
    return email


def validate_password_hash(value: object) -> str:
    password_hash = _require_str("password_hash", value).strip()
    if not password_hash:
        raise AuthorValidationError(
            "password_hash", ValidationKind.EMPTY_OR_INSECURE, "password hash is empty"
        )
    if not _ARGON2_HASH.match(password_hash):
        raise AuthorValidationError(
            "password_hash",
            ValidationKind.INVALID_FORMAT,
            "password hash is not an argon2 hash",
        )
    if len(password_hash) != PASSWORD_HASH_LENGTH:
        kind = (
            ValidationKind.TOO_LARGE
            if len(password_hash) > PASSWORD_HASH_LENGTH
            else ValidationKind.INVALID_FORMAT
        )
        raise AuthorValidationError(
            "password_hash",
            kind,
            f"password hash must be {PASSWORD_HASH_LENGTH} characters",
        )
    return password_hash


def validate_username(value: object) -> str:
    username = sanitize_string(_require_str("username", value))
    if not username:
        raise AuthorValidationError(
            "username", ValidationKind.EMPTY_OR_INSECURE, "username is empty or insecure"
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise AuthorValidationError(
            "username", ValidationKind.TOO_LARGE, "username too large"
        )
    return username
