from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from app.bookflow.core.deps import PageParams, get_page_params
from app.bookflow.db.models import Author, Book, School
from app.bookflow.db.session import get_db
from app.bookflow.schemas.catalog import (
    AuthorCreateRequest,
    AuthorListResponse,
    AuthorResponse,
    AuthorSummary,
    BookCreateRequest,
    BookListResponse,
    BookResponse,
    SchoolCreateRequest,
    SchoolListResponse,
    SchoolResponse,
)
from app.bookflow.schemas.common import build_page_meta
from app.bookflow.schemas.errors import ErrorEnvelope, error_responses
from app.bookflow.services.catalog import CatalogService

router = APIRouter()

_SCHOOL_ERRORS = error_responses(ErrorEnvelope, 400, 404, 409)
_BOOK_ERRORS = error_responses(ErrorEnvelope, 404, 409)


def _book_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        isbn=book.isbn,
        title=book.title,
        description=book.description,
        price=book.price,
        publisher=book.publisher,
        authors=[AuthorSummary(id=author.id, name=author.name) for author in book.authors],
        is_active=book.is_active,
        created_at=book.created_at,
        updated_at=book.updated_at,
    )


def _author_response(author: Author) -> AuthorResponse:
    return AuthorResponse(
        id=author.id,
        name=author.name,
        biography=author.biography,
        is_active=author.is_active,
        created_at=author.created_at,
        updated_at=author.updated_at,
    )


def _school_response(school: School) -> SchoolResponse:
    return SchoolResponse(
        id=school.id,
        school_name=school.school_name,
        address=school.address,
        contact_person=school.contact_person,
        phone=school.phone,
        email=school.email,
        is_approved=school.is_approved,
        created_at=school.created_at,
        updated_at=school.updated_at,
    )


@router.get("/books", response_model=BookListResponse)
def list_books(
    q: str | None = Query(None),
    paging: PageParams = Depends(get_page_params),
    db=Depends(get_db),
):
    rows, total = CatalogService(db).list_books(q=q, page=paging.page, page_size=paging.page_size)
    return BookListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[_book_response(row) for row in rows],
    )


@router.post("/books", response_model=BookResponse, status_code=201, responses=_BOOK_ERRORS)
def create_book(payload: BookCreateRequest, db=Depends(get_db)):
    book = CatalogService(db).create_book(
        isbn=payload.isbn,
        title=payload.title,
        price=payload.price,
        publisher=payload.publisher,
        description=payload.description,
        author_ids=payload.author_ids,
    )
    return _book_response(book)


@router.get("/books/{book_id}", response_model=BookResponse, responses=_BOOK_ERRORS)
def get_book(book_id: int, db=Depends(get_db)):
    return _book_response(CatalogService(db).get_book(book_id))


@router.put("/books/{book_id}/authors/{author_id}", response_model=BookResponse, responses=_BOOK_ERRORS)
def link_book_author(book_id: int, author_id: int, db=Depends(get_db)):
    return _book_response(CatalogService(db).link_author(book_id, author_id))


@router.delete("/books/{book_id}/authors/{author_id}", response_model=BookResponse, responses=_BOOK_ERRORS)
def unlink_book_author(book_id: int, author_id: int, db=Depends(get_db)):
    return _book_response(CatalogService(db).unlink_author(book_id, author_id))


@router.get("/authors", response_model=AuthorListResponse)
def list_authors(
    q: str | None = Query(None),
    paging: PageParams = Depends(get_page_params),
    db=Depends(get_db),
):
    rows, total = CatalogService(db).list_authors(q=q, page=paging.page, page_size=paging.page_size)
    return AuthorListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[_author_response(row) for row in rows],
    )


@router.post("/authors", response_model=AuthorResponse, status_code=201, responses=error_responses(ErrorEnvelope))
def create_author(payload: AuthorCreateRequest, db=Depends(get_db)):
    author = CatalogService(db).create_author(name=payload.name, biography=payload.biography)
    return _author_response(author)


@router.get("/authors/{author_id}", response_model=AuthorResponse, responses=error_responses(ErrorEnvelope, 404))
def get_author(author_id: int, db=Depends(get_db)):
    return _author_response(CatalogService(db).get_author(author_id))


@router.get("/schools", response_model=SchoolListResponse)
def list_schools(
    q: str | None = Query(None),
    is_approved: bool | None = Query(None),
    paging: PageParams = Depends(get_page_params),
    db=Depends(get_db),
):
    rows, total = CatalogService(db).list_schools(
        q=q,
        is_approved=is_approved,
        page=paging.page,
        page_size=paging.page_size,
    )
    return SchoolListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[_school_response(row) for row in rows],
    )


@router.post("/schools", response_model=SchoolResponse, status_code=201, responses=error_responses(ErrorEnvelope))
def create_school(payload: SchoolCreateRequest, db=Depends(get_db)):
    school = CatalogService(db).create_school(
        school_name=payload.school_name,
        address=payload.address,
        contact_person=payload.contact_person,
        phone=payload.phone,
        email=payload.email,
    )
    return _school_response(school)


@router.put("/schools/{school_id}/approve", response_model=SchoolResponse, responses=_SCHOOL_ERRORS)
def approve_school(school_id: int, db=Depends(get_db)):
    return _school_response(CatalogService(db).approve_school(school_id))


@router.put("/schools/{school_id}/reject", status_code=204, responses=_SCHOOL_ERRORS)
def reject_school(school_id: int, db=Depends(get_db)):
    CatalogService(db).reject_school(school_id)
    return Response(status_code=204)
