from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.bookflow.core.errors import setup_exception_handlers
from app.bookflow.core.metrics import metrics


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise exc

    return app


def test_lock_timeout_increments_metric():
    metrics.reset()
    app = _app_raising(OperationalError("UPDATE warehouse_stock", {}, Exception("database is locked")))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 409
    assert response.json()["code"] == "LOCK_TIMEOUT"

    content = metrics.render().content.decode("utf-8")
    if metrics.enabled:
        assert "lock_wait_timeout_total 1.0" in content
    else:
        assert "metrics_disabled" in content


def test_other_operational_errors_are_internal():
    metrics.reset()
    app = _app_raising(OperationalError("SELECT 1", {}, Exception("connection refused")))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert response.json()["details"] == {"type": "OperationalError"}
