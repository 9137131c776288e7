import pytest
from sqlalchemy import select

from app.bookflow.core.error_catalog import InsufficientStockError
from app.bookflow.db.models import SchoolInventoryRequest
from app.bookflow.repos.stock import StockRepository
from app.bookflow.services.book_requests import BookRequestService

from tests.book_request_helpers import (
    create_book,
    create_pending_request,
    create_school,
    school_quantity,
    set_school_stock,
    set_warehouse_stock,
    warehouse_quantity,
)


def _status(db, request_id: int) -> str:
    db.expire_all()
    return db.execute(select(SchoolInventoryRequest.status).where(SchoolInventoryRequest.id == request_id)).scalar_one()


def test_fault_in_school_upsert_rolls_back_everything(client, db_session, monkeypatch):
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 50)
    set_school_stock(db_session, school.id, book.id, 5)
    created = create_pending_request(client, school.id, book.id, 20)

    def _boom(self, school_id, book_id, quantity):
        raise RuntimeError("school ledger unavailable")

    monkeypatch.setattr(StockRepository, "upsert_school_stock", _boom)

    with pytest.raises(RuntimeError):
        BookRequestService(db_session).approve_request(created["id"])

    assert _status(db_session, created["id"]) == "PENDING"
    assert warehouse_quantity(db_session, book.id) == 50
    assert school_quantity(db_session, school.id, book.id) == 5


def test_fault_in_decrement_after_status_flip_rolls_back(client, db_session, monkeypatch):
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 50)
    created = create_pending_request(client, school.id, book.id, 20)

    def _boom(self, book_id, quantity):
        raise RuntimeError("warehouse ledger unavailable")

    monkeypatch.setattr(StockRepository, "decrement_warehouse", _boom)

    with pytest.raises(RuntimeError):
        BookRequestService(db_session).approve_request(created["id"])

    assert _status(db_session, created["id"]) == "PENDING"
    assert warehouse_quantity(db_session, book.id) == 50
    assert school_quantity(db_session, school.id, book.id) is None


def test_unexpected_fault_surfaces_as_internal_error_without_partial_state(client, db_session, monkeypatch):
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 50)
    created = create_pending_request(client, school.id, book.id, 20)

    def _boom(self, school_id, book_id, quantity):
        raise RuntimeError("school ledger unavailable")

    monkeypatch.setattr(StockRepository, "upsert_school_stock", _boom)
    client_without_raise = type(client)(client.app, raise_server_exceptions=False)

    response = client_without_raise.put(f"/book-requests/{created['id']}/approve")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert response.json()["details"] == {"type": "RuntimeError"}
    assert _status(db_session, created["id"]) == "PENDING"
    assert warehouse_quantity(db_session, book.id) == 50


def test_stale_stock_read_is_caught_by_conditional_decrement(client, db_session, monkeypatch):
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 10)
    created = create_pending_request(client, school.id, book.id, 20)

    original = StockRepository.get_warehouse_stock

    def _stale_read(self, book_id):
        # Another approval consumed the stock after this snapshot was taken.
        row = original(self, book_id)
        self.db.expunge(row)
        row.quantity = 100
        return row

    monkeypatch.setattr(StockRepository, "get_warehouse_stock", _stale_read)

    with pytest.raises(InsufficientStockError) as exc_info:
        BookRequestService(db_session).approve_request(created["id"])

    assert exc_info.value.details == {"book_id": book.id, "requested": 20, "available": 10}
    assert _status(db_session, created["id"]) == "PENDING"
    assert warehouse_quantity(db_session, book.id) == 10
    assert school_quantity(db_session, school.id, book.id) is None
