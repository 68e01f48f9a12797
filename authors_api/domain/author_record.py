from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Final, cast

from authors_api.core.exceptions import AuthorValidationError, ValidationKind
from authors_api.domain import validators

# Column order of the `author` table
PERSISTED_COLUMNS: Final[tuple[str, ...]] = (
    "authorId",
    "authorAvatarUrl",
    "authorActivationToken",
    "authorEmail",
    "authorHash",
    "authorUsername",
)
# Never leave the service boundary
PRIVATE_COLUMNS: Final[frozenset[str]] = frozenset({"authorActivationToken", "authorHash"})


class AuthorRecord:
    """
    A validated author account.

    Every assignment goes through the field's validator; a rejected value
    raises AuthorValidationError and leaves the previous value in place.
    """

    __slots__ = (
        "_author_id",
        "_avatar_url",
        "_activation_token",
        "_email",
        "_password_hash",
        "_username",
    )

    def __init__(
        self,
        author_id: uuid.UUID | str | bytes,
        avatar_url: str,
        activation_token: str | None,
        email: str,
        password_hash: str,
        username: str,
    ):
        self._author_id: uuid.UUID | None = None
        self.author_id = author_id
        self.avatar_url = avatar_url
        self.activation_token = activation_token
        self.email = email
        self.password_hash = password_hash
        self.username = username

    @property
    def author_id(self) -> uuid.UUID:
        return cast(uuid.UUID, self._author_id)

    @author_id.setter
    def author_id(self, value: uuid.UUID | str | bytes) -> None:
        author_id = validators.validate_author_id(value)
        if self._author_id is not None and author_id != self._author_id:
            raise AuthorValidationError(
                "author_id",
                ValidationKind.INVALID_IDENTIFIER,
                "author id cannot change once set",
            )
        self._author_id = author_id

    @property
    def avatar_url(self) -> str:
        return self._avatar_url

    @avatar_url.setter
    def avatar_url(self, value: str) -> None:
        self._avatar_url: str = validators.validate_avatar_url(value)

    @property
    def activation_token(self) -> str | None:
        return self._activation_token

    @activation_token.setter
    def activation_token(self, value: str | None) -> None:
        self._activation_token: str | None = validators.validate_activation_token(value)

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email: str = validators.validate_email(value)

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @password_hash.setter
    def password_hash(self, value: str) -> None:
        self._password_hash: str = validators.validate_password_hash(value)

    @property
    def username(self) -> str:
        return self._username

    @username.setter
    def username(self, value: str) -> None:
        self._username: str = validators.validate_username(value)

    @property
    def is_pending_activation(self) -> bool:
        return self._activation_token is not None

    def to_persisted_row(self) -> dict[str, object]:
        """Column name -> value, in table order."""
        return {
            "authorId": self.author_id,
            "authorAvatarUrl": self.avatar_url,
            "authorActivationToken": self.activation_token,
            "authorEmail": self.email,
            "authorHash": self.password_hash,
            "authorUsername": self.username,
        }

    @classmethod
    def from_persisted_row(cls, row: Mapping[str, object]) -> AuthorRecord:
        """Rebuild a record from a stored row. The row is validated again."""
        missing = [column for column in PERSISTED_COLUMNS if column not in row]
        if missing:
            raise KeyError(f"row is missing columns: {', '.join(missing)}")
        return cls(
            author_id=row["authorId"],  # type: ignore[arg-type]
            avatar_url=row["authorAvatarUrl"],  # type: ignore[arg-type]
            activation_token=row["authorActivationToken"],  # type: ignore[arg-type]
            email=row["authorEmail"],  # type: ignore[arg-type]
            password_hash=row["authorHash"],  # type: ignore[arg-type]
            username=row["authorUsername"],  # type: ignore[arg-type]
        )

    def to_public_view(self) -> dict[str, object]:
        """JSON-safe projection without the hash or activation token."""
        view = {
            column: value
            for column, value in self.to_persisted_row().items()
            if column not in PRIVATE_COLUMNS
        }
        view["authorId"] = str(self.author_id)
        return view

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthorRecord):
            return NotImplemented
        return self.to_persisted_row() == other.to_persisted_row()

    def __hash__(self) -> int:
        return hash(self.author_id)

    def __repr__(self) -> str:
        return (
            f"AuthorRecord(author_id={self.author_id}, username={self.username!r}, "
            f"email={self.email!r}, pending_activation={self.is_pending_activation})"
        )
