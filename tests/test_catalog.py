from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.bookflow.core.error_catalog import AppError
from app.bookflow.db.models import School
from app.bookflow.services.catalog import CatalogService

from tests.book_request_helpers import create_book, create_pending_request, create_school


def _book_payload(**overrides):
    payload = {
        "isbn": "9780000000001",
        "title": "Algebra I",
        "description": "Introductory algebra",
        "price": "499.99",
        "publisher": "Nehemiah Publishing",
    }
    payload.update(overrides)
    return payload


def _school_payload(**overrides):
    payload = {
        "school_name": "Springfield High School",
        "address": "742 Evergreen Terrace",
        "contact_person": "Seymour Skinner",
        "phone": "555-1234",
        "email": "contact@springfieldhigh.edu",
    }
    payload.update(overrides)
    return payload


def test_create_and_get_book(client):
    response = client.post("/books", json=_book_payload())

    assert response.status_code == 201
    created = response.json()
    assert created["price"] == "499.99"
    assert created["is_active"] is True

    detail = client.get(f"/books/{created['id']}")
    assert detail.status_code == 200
    assert detail.json()["isbn"] == "9780000000001"


def test_duplicate_isbn_conflicts(client):
    client.post("/books", json=_book_payload())

    response = client.post("/books", json=_book_payload(title="Algebra I, second printing"))

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_ISBN"
    assert response.json()["details"] == {"isbn": "9780000000001"}


def test_book_price_must_be_non_negative(client):
    response = client.post("/books", json=_book_payload(price="-1.00"))

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_unknown_book(client):
    response = client.get("/books/777")

    assert response.status_code == 404
    assert response.json()["code"] == "BOOK_NOT_FOUND"


def test_list_books_searches(client):
    client.post("/books", json=_book_payload(isbn="9780000000001", title="Algebra I"))
    client.post("/books", json=_book_payload(isbn="9780000000002", title="Geometry Essentials"))

    everything = client.get("/books").json()
    geometry = client.get("/books", params={"q": "geometry"}).json()

    assert everything["meta"]["total"] == 2
    assert [row["title"] for row in everything["rows"]] == ["Algebra I", "Geometry Essentials"]
    assert [row["isbn"] for row in geometry["rows"]] == ["9780000000002"]


def test_school_registration_and_approval(client):
    created = client.post("/schools", json=_school_payload()).json()
    assert created["is_approved"] is False

    approved = client.put(f"/schools/{created['id']}/approve")
    again = client.put(f"/schools/{created['id']}/approve")

    assert approved.status_code == 200
    assert approved.json()["is_approved"] is True
    assert again.status_code == 400
    assert again.json()["code"] == "SCHOOL_ALREADY_APPROVED"
    assert again.json()["message"] == "School is already approved"


def test_list_schools_filters_by_approval(client):
    first = client.post("/schools", json=_school_payload(school_name="Springfield High School")).json()
    client.post("/schools", json=_school_payload(school_name="Shelbyville Elementary"))
    client.put(f"/schools/{first['id']}/approve")

    approved = client.get("/schools", params={"is_approved": "true"}).json()
    pending = client.get("/schools", params={"is_approved": "false"}).json()

    assert [row["school_name"] for row in approved["rows"]] == ["Springfield High School"]
    assert [row["school_name"] for row in pending["rows"]] == ["Shelbyville Elementary"]


def test_approve_unknown_school(client):
    response = client.put("/schools/31337/approve")

    assert response.status_code == 404
    assert response.json()["code"] == "SCHOOL_NOT_FOUND"


def test_duplicate_isbn_lost_to_unique_constraint_keeps_cause(client, db_session, monkeypatch):
    client.post("/books", json=_book_payload())
    service = CatalogService(db_session)
    # Simulate a concurrent insert landing between the lookup and the commit.
    monkeypatch.setattr(service.repo, "get_book_by_isbn", lambda isbn: None)

    with pytest.raises(AppError) as exc_info:
        service.create_book(
            isbn="9780000000001",
            title="Algebra I, reprint",
            price=Decimal("10.00"),
            publisher="Nehemiah Publishing",
        )

    assert exc_info.value.error.code == "DUPLICATE_ISBN"
    assert isinstance(exc_info.value.__cause__, IntegrityError)
    assert not db_session.new


def test_failed_school_approval_commit_is_rolled_back(client, db_session, monkeypatch):
    school = create_school(db_session, approved=False)
    school_id = school.id

    def _failing_commit():
        raise RuntimeError("commit failed")

    monkeypatch.setattr(db_session, "commit", _failing_commit)

    with pytest.raises(RuntimeError):
        CatalogService(db_session).approve_school(school_id)

    assert not db_session.dirty
    assert db_session.get(School, school_id).is_approved is False


def test_reject_pending_school_removes_registration(client):
    created = client.post("/schools", json=_school_payload()).json()

    response = client.put(f"/schools/{created['id']}/reject")

    assert response.status_code == 204
    assert client.get("/schools").json()["meta"]["total"] == 0
    again = client.put(f"/schools/{created['id']}/reject")
    assert again.status_code == 404
    assert again.json()["code"] == "SCHOOL_NOT_FOUND"


def test_reject_approved_school_is_refused(client):
    created = client.post("/schools", json=_school_payload()).json()
    client.put(f"/schools/{created['id']}/approve")

    response = client.put(f"/schools/{created['id']}/reject")

    assert response.status_code == 400
    assert response.json()["code"] == "SCHOOL_ALREADY_APPROVED"
    assert response.json()["message"] == "School is already approved"
    assert client.get("/schools").json()["meta"]["total"] == 1


def test_reject_unknown_school(client):
    response = client.put("/schools/31337/reject")

    assert response.status_code == 404
    assert response.json()["code"] == "SCHOOL_NOT_FOUND"


def test_reject_pending_school_with_requests_conflicts(client, db_session):
    book = create_book(db_session)
    school = create_school(db_session, approved=False)
    create_pending_request(client, school.id, book.id, 5)

    response = client.put(f"/schools/{school.id}/reject")

    assert response.status_code == 409
    assert response.json()["code"] == "SCHOOL_IN_USE"
    assert response.json()["details"] == {"school_id": school.id}
    assert client.get("/schools", params={"is_approved": "false"}).json()["meta"]["total"] == 1
