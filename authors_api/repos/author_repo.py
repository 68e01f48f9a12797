import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar, cast

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import CursorResult, RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from authors_api.core.exceptions import AuthorStorageError, AuthorValidationError
from authors_api.core.logging import get_logger
from authors_api.domain import validators
from authors_api.domain.author_record import AuthorRecord
from authors_api.models.author import author_table
from authors_api.utils.pagination import clamp_pagination
from authors_api.utils.sanitize import escape_like, sanitize_string

logger = get_logger(__name__)

T = TypeVar("T")

c = author_table.c


@contextmanager
def _storage_errors(db: Session, operation: str) -> Iterator[None]:
    """Roll back and wrap database failures with the failing operation."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Author %s failed: %s", operation, e.__class__.__name__)
        raise AuthorStorageError(
            operation, str(getattr(e, "orig", None) or e), conflict=isinstance(e, IntegrityError)
        ) from e


def _rehydrate(operation: str, row: RowMapping) -> AuthorRecord:
    """A stored row that no longer validates is a storage fault, not a caller one."""
    try:
        return AuthorRecord.from_persisted_row(row)
    except AuthorValidationError as e:
        logger.warning(
            "Author %s returned an invalid row: %s (%s)", operation, e.field, e.kind.value
        )
        raise AuthorStorageError(
            operation, f"stored row failed validation on {e.field}: {e.message}"
        ) from e


def _one(db: Session, operation: str, stmt: Select[tuple[object, ...]]) -> AuthorRecord | None:
    with _storage_errors(db, operation):
        row: RowMapping | None = db.execute(stmt).mappings().first()
    if row is None:
        return None
    return _rehydrate(operation, row)


def _many(db: Session, operation: str, stmt: Select[tuple[object, ...]]) -> list[AuthorRecord]:
    with _storage_errors(db, operation):
        rows = db.execute(stmt).mappings().all()
    return [_rehydrate(operation, row) for row in rows]


def _write(db: Session, operation: str, run: Callable[[], T]) -> T:
    with _storage_errors(db, operation):
        result = run()
        db.commit()
    return result


class AuthorRepository:
    """One parameterized statement per operation against the `author` table."""

    @staticmethod
    # Insert a new author
    def insert(db: Session, record: AuthorRecord) -> AuthorRecord:
        stmt = insert(author_table).values(record.to_persisted_row())
        _ = _write(db, "insert", lambda: db.execute(stmt))
        logger.info("Inserted author %s", record.author_id)
        return record

    @staticmethod
    # Update every column of an existing author
    def update(db: Session, record: AuthorRecord) -> bool:
        values = record.to_persisted_row()
        author_id = values.pop("authorId")
        stmt = update(author_table).where(c.authorId == author_id).values(values)
        result = _write(db, "update", lambda: cast(CursorResult[object], db.execute(stmt)))
        updated = result.rowcount == 1
        logger.info("Updated author %s (found=%s)", author_id, updated)
        return updated

    @staticmethod
    # Delete an author by id
    def delete(db: Session, author_id: uuid.UUID | str) -> bool:
        author_id = validators.validate_author_id(author_id)
        stmt = delete(author_table).where(c.authorId == author_id)
        result = _write(db, "delete", lambda: cast(CursorResult[object], db.execute(stmt)))
        deleted = result.rowcount == 1
        logger.info("Deleted author %s (found=%s)", author_id, deleted)
        return deleted

    @staticmethod
    # Get an author by id
    def get_by_id(db: Session, author_id: uuid.UUID | str) -> AuthorRecord | None:
        author_id = validators.validate_author_id(author_id)
        stmt = select(author_table).where(c.authorId == author_id)
        return _one(db, "get_by_id", stmt)

    @staticmethod
    # Get an author by email
    def get_by_email(db: Session, email: str) -> AuthorRecord | None:
        email = validators.validate_email(email)
        stmt = select(author_table).where(c.authorEmail == email)
        return _one(db, "get_by_email", stmt)

    @staticmethod
    # Get an author by activation token
    def get_by_activation_token(db: Session, token: str) -> AuthorRecord | None:
        token = validators.validate_activation_token(token)
        if token is None:
            return None
        stmt = select(author_table).where(c.authorActivationToken == token)
        return _one(db, "get_by_activation_token", stmt)

    @staticmethod
    # Get an author by username
    def get_by_username(db: Session, username: str) -> AuthorRecord | None:
        username = validators.validate_username(username)
        stmt = select(author_table).where(c.authorUsername == username)
        return _one(db, "get_by_username", stmt)

    @staticmethod
    # Search authors whose username contains a fragment
    def search_by_username(
        db: Session,
        fragment: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuthorRecord]:
        limit, offset = clamp_pagination(limit, offset)
        fragment = validators.validate_username(sanitize_string(fragment))

        stmt = (
            select(author_table)
            .where(c.authorUsername.like(f"%{escape_like(fragment)}%", escape="\\"))
            .order_by(c.authorUsername.asc())
            .limit(limit)
            .offset(offset)
        )
        return _many(db, "search_by_username", stmt)

    @staticmethod
    # List authors
    def list(db: Session, limit: int = 50, offset: int = 0) -> list[AuthorRecord]:
        limit, offset = clamp_pagination(limit, offset)
        stmt = select(author_table).order_by(c.authorUsername.asc()).limit(limit).offset(offset)
        return _many(db, "list", stmt)
