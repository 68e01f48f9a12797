import uuid
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session
from authors_api.db.session import get_db
from authors_api.services.author_service import AuthorService
from authors_api.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from authors_api.core.logging import get_logger
from typing import Annotated
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
)
router = APIRouter(prefix="/authors", tags=["authors"])

DbSession = Annotated[Session, Depends(get_db)]


@router.post("", response_model=AuthorRead, status_code=HTTP_201_CREATED)
def create_author(data: AuthorCreate, db: DbSession, request: Request):
    record = AuthorService.create_author(db, data)
    get_logger(__name__, request).info("Created author %s", record.author_id)
    return record.to_public_view()


@router.get("", response_model=list[AuthorRead])
def list_authors(
    db: DbSession,
    request: Request,
    q: Annotated[str | None, Query(max_length=32)] = None,
    limit: Annotated[int, Query(ge=1)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    logger = get_logger(__name__, request)
    if q:
        logger.info("Searching authors")
        records = AuthorService.search_authors(db, q, limit=limit, offset=offset)
    else:
        logger.info("Listing authors")
        records = AuthorService.list_authors(db, limit=limit, offset=offset)
    return [record.to_public_view() for record in records]


@router.get("/by-email/{email}", response_model=AuthorRead)
def get_author_by_email(email: str, db: DbSession):
    return AuthorService.get_author_by_email(db, email).to_public_view()


@router.post("/activate/{token}", response_model=AuthorRead)
def activate_author(token: str, db: DbSession, request: Request):
    record = AuthorService.activate_author(db, token)
    get_logger(__name__, request).info("Activated author %s", record.author_id)
    return record.to_public_view()


@router.get("/{author_id}", response_model=AuthorRead)
def get_author(author_id: uuid.UUID, db: DbSession):
    return AuthorService.get_author(db, author_id).to_public_view()


@router.patch("/{author_id}", response_model=AuthorRead)
def update_author(author_id: uuid.UUID, data: AuthorUpdate, db: DbSession):
    return AuthorService.update_author(db, author_id, data).to_public_view()


@router.delete("/{author_id}", status_code=HTTP_204_NO_CONTENT)
def delete_author(author_id: uuid.UUID, db: DbSession, request: Request):
    AuthorService.delete_author(db, author_id)
    get_logger(__name__, request).info("Deleted author %s", author_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
