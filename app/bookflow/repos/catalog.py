from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from app.bookflow.db.models import Author, Book, BookAuthor, School


class CatalogRepository:
    def __init__(self, db):
        self.db = db

    def get_book(self, book_id: int) -> Book | None:
        return self.db.execute(select(Book).where(Book.id == book_id)).scalars().first()

    def get_book_by_isbn(self, isbn: str) -> Book | None:
        return self.db.execute(select(Book).where(Book.isbn == isbn)).scalars().first()

    def get_school(self, school_id: int) -> School | None:
        return self.db.execute(select(School).where(School.id == school_id)).scalars().first()

    def get_author(self, author_id: int) -> Author | None:
        return self.db.execute(select(Author).where(Author.id == author_id)).scalars().first()

    def get_active_authors(self, author_ids: list[int]) -> list[Author]:
        if not author_ids:
            return []
        return (
            self.db.execute(select(Author).where(Author.id.in_(author_ids), Author.is_active.is_(True)))
            .scalars()
            .all()
        )

    def get_book_author(self, book_id: int, author_id: int) -> BookAuthor | None:
        return (
            self.db.execute(
                select(BookAuthor).where(BookAuthor.book_id == book_id, BookAuthor.author_id == author_id)
            )
            .scalars()
            .first()
        )

    def add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj) -> None:
        self.db.delete(obj)
        self.db.flush()

    def list_books(self, *, q: str | None, page: int, page_size: int) -> tuple[list[Book], int]:
        query = select(Book).where(Book.is_active.is_(True))
        if q:
            like = f"%{q}%"
            query = query.where(or_(Book.title.ilike(like), Book.isbn.ilike(like)))
        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(
                query.options(selectinload(Book.authors))
                .order_by(Book.title.asc(), Book.id.asc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            .scalars()
            .all()
        )
        return rows, int(total)

    def list_schools(
        self,
        *,
        q: str | None,
        is_approved: bool | None,
        page: int,
        page_size: int,
    ) -> tuple[list[School], int]:
        query = select(School)
        if q:
            query = query.where(School.school_name.ilike(f"%{q}%"))
        if is_approved is not None:
            query = query.where(School.is_approved.is_(is_approved))
        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(
                query.order_by(School.school_name.asc(), School.id.asc()).offset((page - 1) * page_size).limit(page_size)
            )
            .scalars()
            .all()
        )
        return rows, int(total)

    def list_authors(self, *, q: str | None, page: int, page_size: int) -> tuple[list[Author], int]:
        query = select(Author).where(Author.is_active.is_(True))
        if q:
            query = query.where(Author.name.ilike(f"%{q}%"))
        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(query.order_by(Author.name.asc(), Author.id.asc()).offset((page - 1) * page_size).limit(page_size))
            .scalars()
            .all()
        )
        return rows, int(total)
