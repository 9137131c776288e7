from decimal import Decimal

from sqlalchemy import select

from app.bookflow.db.models import Book, School, WarehouseStock


DEFAULT_PUBLISHER = "Nehemiah Publishing"

# (isbn, title, price, opening warehouse quantity)
DEFAULT_BOOKS = [
    ("9780000000001", "Algebra I", Decimal("499.99"), 500),
    ("9780000000002", "Geometry Essentials", Decimal("459.99"), 120),
    ("9780000000003", "Biology Basics", Decimal("529.99"), 120),
    ("9780000000004", "Chemistry Fundamentals", Decimal("549.99"), 80),
    ("9780000000005", "Physics Principles", Decimal("579.99"), 80),
    ("9780000000006", "World History I", Decimal("399.99"), 60),
    ("9780000000007", "World History II", Decimal("419.99"), 60),
    ("9780000000008", "English Literature", Decimal("469.99"), 100),
    ("9780000000009", "Computer Science Intro", Decimal("599.99"), 40),
    ("9780000000010", "Economics 101", Decimal("489.99"), 40),
    ("9780000000011", "Civics and Government", Decimal("379.99"), 0),
]

DEFAULT_SCHOOL = {
    "school_name": "Springfield High School",
    "address": "742 Evergreen Terrace",
    "contact_person": "Seymour Skinner",
    "phone": "555-1234",
    "email": "contact@springfieldhigh.edu",
}


def _get_or_create_book(db, isbn: str, title: str, price: Decimal) -> Book:
    book = db.execute(select(Book).where(Book.isbn == isbn)).scalars().first()
    if book:
        return book
    book = Book(isbn=isbn, title=title, price=price, publisher=DEFAULT_PUBLISHER, is_active=True)
    db.add(book)
    db.flush()
    return book


def _get_or_create_warehouse_stock(db, book: Book, quantity: int) -> WarehouseStock:
    # Opening balance only; a re-run never tops stock back up.
    row = db.execute(select(WarehouseStock).where(WarehouseStock.book_id == book.id)).scalars().first()
    if row:
        return row
    row = WarehouseStock(book_id=book.id, quantity=quantity, is_active=True)
    db.add(row)
    return row


def _get_or_create_school(db) -> School:
    school = (
        db.execute(select(School).where(School.school_name == DEFAULT_SCHOOL["school_name"]))
        .scalars()
        .first()
    )
    if school:
        return school
    school = School(**DEFAULT_SCHOOL, is_approved=True)
    db.add(school)
    return school


def run_seed(db):
    for isbn, title, price, quantity in DEFAULT_BOOKS:
        book = _get_or_create_book(db, isbn, title, price)
        _get_or_create_warehouse_stock(db, book, quantity)
    _get_or_create_school(db)
    db.commit()
