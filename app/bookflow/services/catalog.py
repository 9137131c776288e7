from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from app.bookflow.core.error_catalog import (
    AppError,
    AuthorNotFoundError,
    BookNotFoundError,
    ErrorCatalog,
    SchoolAlreadyApprovedError,
    SchoolNotFoundError,
)
from app.bookflow.core.logging import log_json
from app.bookflow.db.models import Author, Book, BookAuthor, School
from app.bookflow.repos.catalog import CatalogRepository

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db):
        self.db = db
        self.repo = CatalogRepository(db)

    def _require_authors(self, author_ids: list[int]) -> list[Author]:
        wanted = list(dict.fromkeys(author_ids))
        found = {author.id: author for author in self.repo.get_active_authors(wanted)}
        for author_id in wanted:
            if author_id not in found:
                raise AuthorNotFoundError(author_id)
        return [found[author_id] for author_id in wanted]

    def create_book(
        self,
        *,
        isbn: str,
        title: str,
        price: Decimal,
        publisher: str,
        description: str | None = None,
        author_ids: list[int] | None = None,
    ) -> Book:
        if self.repo.get_book_by_isbn(isbn) is not None:
            raise AppError(ErrorCatalog.DUPLICATE_ISBN, details={"isbn": isbn})
        authors = self._require_authors(author_ids or [])
        book = Book(
            isbn=isbn,
            title=title,
            description=description,
            price=price,
            publisher=publisher,
            is_active=True,
        )
        try:
            self.repo.add(book)
            for author in authors:
                self.repo.add(BookAuthor(book_id=book.id, author_id=author.id))
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise AppError(ErrorCatalog.DUPLICATE_ISBN, details={"isbn": isbn}) from exc
        self.db.refresh(book)
        return book

    def get_book(self, book_id: int) -> Book:
        book = self.repo.get_book(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def list_books(self, *, q: str | None, page: int, page_size: int) -> tuple[list[Book], int]:
        return self.repo.list_books(q=q, page=page, page_size=page_size)

    def create_author(self, *, name: str, biography: str | None = None) -> Author:
        author = Author(name=name, biography=biography, is_active=True)
        try:
            self.repo.add(author)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(author)
        return author

    def get_author(self, author_id: int) -> Author:
        author = self.repo.get_author(author_id)
        if author is None or not author.is_active:
            raise AuthorNotFoundError(author_id)
        return author

    def list_authors(self, *, q: str | None, page: int, page_size: int) -> tuple[list[Author], int]:
        return self.repo.list_authors(q=q, page=page, page_size=page_size)

    def link_author(self, book_id: int, author_id: int) -> Book:
        """Credit an author on a book. Linking the same pair twice is a no-op."""
        book = self.get_book(book_id)
        self.get_author(author_id)
        if self.repo.get_book_author(book_id, author_id) is not None:
            return book
        try:
            self.repo.add(BookAuthor(book_id=book_id, author_id=author_id))
            self.db.commit()
        except IntegrityError:
            # A concurrent link for the same pair won the unique constraint.
            self.db.rollback()
        self.db.refresh(book)
        return book

    def unlink_author(self, book_id: int, author_id: int) -> Book:
        book = self.get_book(book_id)
        link = self.repo.get_book_author(book_id, author_id)
        if link is None:
            raise AuthorNotFoundError(author_id)
        try:
            self.repo.delete(link)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(book)
        return book

    def create_school(
        self,
        *,
        school_name: str,
        address: str,
        contact_person: str,
        phone: str,
        email: str,
    ) -> School:
        school = School(
            school_name=school_name,
            address=address,
            contact_person=contact_person,
            phone=phone,
            email=email,
            is_approved=False,
        )
        try:
            self.repo.add(school)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(school)
        return school

    def get_school(self, school_id: int) -> School:
        school = self.repo.get_school(school_id)
        if school is None:
            raise SchoolNotFoundError(school_id)
        return school

    def list_schools(
        self,
        *,
        q: str | None,
        is_approved: bool | None,
        page: int,
        page_size: int,
    ) -> tuple[list[School], int]:
        return self.repo.list_schools(q=q, is_approved=is_approved, page=page, page_size=page_size)

    def approve_school(self, school_id: int) -> School:
        school = self.get_school(school_id)
        if school.is_approved:
            raise SchoolAlreadyApprovedError(school_id)
        try:
            school.is_approved = True
            school.updated_at = datetime.utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(school)
        log_json(logger, {"event": "school.approve", "school_id": school_id})
        return school

    def reject_school(self, school_id: int) -> None:
        """Drop a pending registration. Approved schools are kept."""
        school = self.get_school(school_id)
        if school.is_approved:
            raise SchoolAlreadyApprovedError(school_id)
        try:
            self.repo.delete(school)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise AppError(ErrorCatalog.SCHOOL_IN_USE, details={"school_id": school_id}) from exc
        except Exception:
            self.db.rollback()
            raise
        log_json(logger, {"event": "school.reject", "school_id": school_id})
