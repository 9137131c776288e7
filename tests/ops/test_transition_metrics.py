from app.bookflow.core.metrics import metrics

from tests.book_request_helpers import create_book, create_pending_request, create_school, set_warehouse_stock


def test_metrics_endpoint_counts_transitions(client, db_session):
    metrics.reset()
    book = create_book(db_session)
    school = create_school(db_session)
    set_warehouse_stock(db_session, book.id, 5)
    created = create_pending_request(client, school.id, book.id, 10)
    client.put(f"/book-requests/{created['id']}/approve")
    client.put(f"/book-requests/{created['id']}/reject")
    client.put(f"/book-requests/{created['id']}/reject")

    response = client.get("/ops/metrics")

    assert response.status_code == 200
    content = response.text
    if not metrics.enabled:
        assert "metrics_disabled" in content
        return
    assert 'book_request_transitions_total{result="ok",transition="create"} 1.0' in content
    assert 'book_request_transitions_total{result="insufficient_stock",transition="approve"} 1.0' in content
    assert 'book_request_transitions_total{result="ok",transition="reject"} 1.0' in content
    assert 'book_request_transitions_total{result="request_not_pending",transition="reject"} 1.0' in content
    assert 'http_requests_total{method="PUT",route="/book-requests/{request_id}/reject",status="400"} 1.0' in content
