from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import func, select

from app.bookflow.db.models import Book, School, SchoolStock, WarehouseStock


def create_book(db, *, title: str = "Algebra I", price: Decimal = Decimal("499.99"), is_active: bool = True) -> Book:
    book = Book(
        isbn=f"978{uuid.uuid4().int % 10**10:010d}",
        title=title,
        price=price,
        publisher="Nehemiah Publishing",
        is_active=is_active,
    )
    db.add(book)
    db.commit()
    return book


def create_school(db, *, name: str = "Springfield High School", approved: bool = True) -> School:
    school = School(
        school_name=name,
        address="742 Evergreen Terrace",
        contact_person="Seymour Skinner",
        phone="555-1234",
        email="contact@springfieldhigh.edu",
        is_approved=approved,
    )
    db.add(school)
    db.commit()
    return school


def set_warehouse_stock(db, book_id: int, quantity: int, *, is_active: bool = True) -> WarehouseStock:
    row = db.execute(select(WarehouseStock).where(WarehouseStock.book_id == book_id)).scalars().first()
    if row is None:
        row = WarehouseStock(book_id=book_id, quantity=quantity, is_active=is_active)
        db.add(row)
    else:
        row.quantity = quantity
        row.is_active = is_active
    db.commit()
    return row


def set_school_stock(db, school_id: int, book_id: int, quantity: int, *, is_active: bool = True) -> SchoolStock:
    row = SchoolStock(school_id=school_id, book_id=book_id, quantity=quantity, is_active=is_active)
    db.add(row)
    db.commit()
    return row


def warehouse_quantity(db, book_id: int) -> int | None:
    db.expire_all()
    return db.execute(select(WarehouseStock.quantity).where(WarehouseStock.book_id == book_id)).scalar_one_or_none()


def school_quantity(db, school_id: int, book_id: int) -> int | None:
    db.expire_all()
    return db.execute(
        select(SchoolStock.quantity).where(SchoolStock.school_id == school_id, SchoolStock.book_id == book_id)
    ).scalar_one_or_none()


def school_stock_rows(db, school_id: int, book_id: int) -> int:
    return db.execute(
        select(func.count())
        .select_from(SchoolStock)
        .where(SchoolStock.school_id == school_id, SchoolStock.book_id == book_id)
    ).scalar_one()


def post_request(client, school_id: int, book_id: int, quantity: int):
    return client.post(
        "/book-requests",
        json={"school_id": school_id, "book_id": book_id, "quantity": quantity},
    )


def create_pending_request(client, school_id: int, book_id: int, quantity: int) -> dict:
    response = post_request(client, school_id, book_id, quantity)
    assert response.status_code == 201, response.text
    return response.json()
