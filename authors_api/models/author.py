from typing import cast
from sqlalchemy import CHAR, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import uuid
from authors_api.core.config import ACTIVATION_TOKEN_MAX_LENGTH
from authors_api.models.base import Base
from authors_api.domain.validators import (
    AVATAR_URL_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    PASSWORD_HASH_LENGTH,
    USERNAME_MAX_LENGTH,
)
#Author
class Author(Base):
    __tablename__: str = "author"

    author_id: Mapped[uuid.UUID] = mapped_column("authorId", Uuid, primary_key=True)
    avatar_url: Mapped[str] = mapped_column(
        "authorAvatarUrl", String(AVATAR_URL_MAX_LENGTH), nullable=False
    )
    activation_token: Mapped[str | None] = mapped_column(
        "authorActivationToken", String(ACTIVATION_TOKEN_MAX_LENGTH), nullable=True, index=True
    )
    email: Mapped[str] = mapped_column(
        "authorEmail", String(EMAIL_MAX_LENGTH), nullable=False, unique=True
    )
    password_hash: Mapped[str] = mapped_column(
        "authorHash", CHAR(PASSWORD_HASH_LENGTH), nullable=False
    )
    username: Mapped[str] = mapped_column(
        "authorUsername", String(USERNAME_MAX_LENGTH), nullable=False, unique=True
    )


author_table: Table = cast(Table, Author.__table__)
