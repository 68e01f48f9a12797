from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import ClassVar

import uuid

from authors_api.domain import validators


# Author base schema
class AuthorBase(BaseModel):
    avatar_url: str = Field(alias="authorAvatarUrl")
    email: EmailStr = Field(alias="authorEmail")
    username: str = Field(alias="authorUsername")

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)

    @field_validator("avatar_url")
    @classmethod
    def check_avatar_url(cls, v: str) -> str:
        return validators.validate_avatar_url(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validators.validate_email(v)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return validators.validate_username(v)


# Author create schema
class AuthorCreate(AuthorBase):
    password_hash: str = Field(alias="authorHash")

    @field_validator("password_hash")
    @classmethod
    def check_password_hash(cls, v: str) -> str:
        return validators.validate_password_hash(v)


# Author partial update schema
class AuthorUpdate(BaseModel):
    avatar_url: str | None = Field(default=None, alias="authorAvatarUrl")
    email: EmailStr | None = Field(default=None, alias="authorEmail")
    password_hash: str | None = Field(default=None, alias="authorHash")
    username: str | None = Field(default=None, alias="authorUsername")

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("avatar_url")
    @classmethod
    def check_avatar_url(cls, v: str | None) -> str:
        return validators.validate_avatar_url(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str:
        return validators.validate_email(v)

    @field_validator("password_hash")
    @classmethod
    def check_password_hash(cls, v: str | None) -> str:
        return validators.validate_password_hash(v)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str:
        return validators.validate_username(v)


# Author read schema (public view)
class AuthorRead(BaseModel):
    author_id: uuid.UUID = Field(alias="authorId")
    avatar_url: str = Field(alias="authorAvatarUrl")
    email: str = Field(alias="authorEmail")
    username: str = Field(alias="authorUsername")

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)
