def _response_ref(spec, path, method, status_code):
    return spec["paths"][path][method]["responses"][status_code]["content"]["application/json"]["schema"]["$ref"]


def test_book_request_routes_document_typed_error_bodies(client):
    spec = client.get("/openapi.json").json()

    assert _response_ref(spec, "/book-requests/{request_id}/approve", "put", "400").endswith(
        "/BookRequestErrorResponse"
    )
    assert _response_ref(spec, "/book-requests/{request_id}/approve", "put", "422").endswith(
        "/ValidationErrorResponse"
    )
    assert _response_ref(spec, "/stock-entries/{entry_id}", "delete", "400").endswith("/StockEntryErrorResponse")

    schemas = spec["components"]["schemas"]
    assert {"StockShortfallDetails", "OpenRequestDetails", "RequestStateDetails", "FieldErrorDetails"} <= set(schemas)
    assert set(schemas["StockShortfallDetails"]["required"]) == {"book_id", "requested"}


def test_insufficient_stock_body_matches_documented_details(client, db_session):
    from app.bookflow.schemas.errors import BookRequestErrorResponse, StockShortfallDetails
    from tests.book_request_helpers import create_book, create_pending_request, create_school, set_warehouse_stock

    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 2)
    created = create_pending_request(client, school.id, book.id, 5)

    response = client.put(f"/book-requests/{created['id']}/approve")

    assert response.status_code == 400
    body = BookRequestErrorResponse.model_validate(response.json())
    assert isinstance(body.details, StockShortfallDetails)
    assert (body.details.requested, body.details.available) == (5, 2)
