from tests.book_request_helpers import (
    create_book,
    create_pending_request,
    create_school,
    school_quantity,
    set_warehouse_stock,
    warehouse_quantity,
)


def test_reject_pending_request(client, db_session):
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 50)
    created = create_pending_request(client, school.id, book.id, 20)

    response = client.put(f"/book-requests/{created['id']}/reject")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "REJECTED"
    assert payload["resolved_at"] is not None
    assert warehouse_quantity(db_session, book.id) == 50
    assert school_quantity(db_session, school.id, book.id) is None


def test_reject_does_not_need_stock(client, db_session):
    book = create_book(db_session)
    school = create_school(db_session)
    created = create_pending_request(client, school.id, book.id, 20)

    response = client.put(f"/book-requests/{created['id']}/reject")

    assert response.status_code == 200
    assert warehouse_quantity(db_session, book.id) is None


def test_second_reject_is_not_pending(client, db_session):
    book = create_book(db_session)
    school = create_school(db_session)
    created = create_pending_request(client, school.id, book.id, 2)
    client.put(f"/book-requests/{created['id']}/reject")

    response = client.put(f"/book-requests/{created['id']}/reject")

    assert response.status_code == 400
    assert response.json()["details"] == {"request_id": created["id"], "status": "REJECTED"}


def test_approve_after_reject_is_not_pending(client, db_session):
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 50)
    created = create_pending_request(client, school.id, book.id, 20)
    client.put(f"/book-requests/{created['id']}/reject")

    response = client.put(f"/book-requests/{created['id']}/approve")

    assert response.status_code == 400
    assert response.json()["code"] == "REQUEST_NOT_PENDING"
    assert warehouse_quantity(db_session, book.id) == 50
    assert school_quantity(db_session, school.id, book.id) is None


def test_reject_unknown_request_is_not_found(client):
    response = client.put("/book-requests/4242/reject")

    assert response.status_code == 404
    assert response.json()["code"] == "REQUEST_NOT_FOUND"
