import uuid
from sqlalchemy.orm import Session

from authors_api.core.config import get_settings
from authors_api.core.exceptions import AuthorNotFoundError
from authors_api.core.logging import get_logger
from authors_api.domain.author_record import AuthorRecord
from authors_api.repos.author_repo import AuthorRepository
from authors_api.schemas.author import AuthorCreate, AuthorUpdate
from authors_api.utils.tokens import generate_activation_token

logger = get_logger(__name__)


class AuthorService:
    @staticmethod
    # Create author with a pending activation
    def create_author(db: Session, data: AuthorCreate) -> AuthorRecord:
        record = AuthorRecord(
            author_id=uuid.uuid4(),
            avatar_url=data.avatar_url,
            activation_token=generate_activation_token(),
            email=data.email,
            password_hash=data.password_hash,
            username=data.username,
        )
        return AuthorRepository.insert(db, record)

    @staticmethod
    # Get author by id
    def get_author(db: Session, author_id: uuid.UUID | str) -> AuthorRecord:
        record = AuthorRepository.get_by_id(db, author_id)
        if record is None:
            raise AuthorNotFoundError("author_id", author_id)
        return record

    @staticmethod
    # Get author by email
    def get_author_by_email(db: Session, email: str) -> AuthorRecord:
        record = AuthorRepository.get_by_email(db, email)
        if record is None:
            raise AuthorNotFoundError("email", email)
        return record

    @staticmethod
    # Get author by activation token
    def get_author_by_activation_token(db: Session, token: str) -> AuthorRecord:
        record = AuthorRepository.get_by_activation_token(db, token)
        if record is None:
            raise AuthorNotFoundError("activation_token", "<redacted>")
        return record

    @staticmethod
    # List authors
    def list_authors(
        db: Session,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AuthorRecord]:
        if limit is None:
            limit = get_settings().DEFAULT_PAGE_SIZE
        return AuthorRepository.list(db, limit=limit, offset=offset)

    @staticmethod
    # Search authors by username fragment
    def search_authors(
        db: Session,
        q: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AuthorRecord]:
        if limit is None:
            limit = get_settings().DEFAULT_PAGE_SIZE
        return AuthorRepository.search_by_username(db, q, limit=limit, offset=offset)

    @staticmethod
    # Apply a partial update
    def update_author(
        db: Session, author_id: uuid.UUID | str, data: AuthorUpdate
    ) -> AuthorRecord:
        record = AuthorService.get_author(db, author_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(record, field, value)

        if not AuthorRepository.update(db, record):
            raise AuthorNotFoundError("author_id", author_id)
        return record

    @staticmethod
    # Delete author
    def delete_author(db: Session, author_id: uuid.UUID | str) -> None:
        if not AuthorRepository.delete(db, author_id):
            raise AuthorNotFoundError("author_id", author_id)

    @staticmethod
    # Activate a pending account
    def activate_author(db: Session, token: str) -> AuthorRecord:
        record = AuthorService.get_author_by_activation_token(db, token)
        record.activation_token = None
        if not AuthorRepository.update(db, record):
            raise AuthorNotFoundError("author_id", record.author_id)
        logger.info("Activated author %s", record.author_id)
        return record
