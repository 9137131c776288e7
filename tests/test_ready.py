import app.bookflow.routers.health as health_routes


class _BrokenSession:
    def execute(self, *args, **kwargs):
        raise ConnectionError("database went away")


def test_ready(client):
    response = client.get("/ready")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["trace_id"]


def test_ready_reports_unavailable_database(client):
    client.app.dependency_overrides[health_routes.get_db] = lambda: _BrokenSession()
    try:
        response = client.get("/ready")
    finally:
        client.app.dependency_overrides.clear()

    assert response.status_code == 503
    payload = response.json()
    assert payload["code"] == "DB_UNAVAILABLE"
    assert payload["details"] == {"type": "ConnectionError"}
