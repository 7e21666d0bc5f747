"""Test health, metrics and middleware behaviour."""

from conftest import ADMIN_TOKEN


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_liveness(client):
    response = client.get("/health/live")
    assert response.status_code == 200


def test_readiness_ok(client):
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "ok"


def test_readiness_reports_database_failure(client, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("down")

    monkeypatch.setattr("iamsafe.api.routers.system.db_cursor", broken)

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_metrics_endpoint(client):
    client.post("/update", data={"name": "", "status": ""})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert 'status_submissions_total{result="invalid"}' in response.text


def test_metrics_do_not_label_arbitrary_paths(client):
    client.get("/some/random/path")
    text = client.get("/metrics").text
    assert "/some/random/path" not in text


def test_security_headers(client):
    response = client.get("/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Content-Security-Policy" in response.headers


def test_request_id_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_untrusted_host_rejected(client):
    response = client.get("/", headers={"Host": "evil.example.com"})
    assert response.status_code == 400


def test_admin_token_not_logged(client, caplog):
    caplog.set_level("INFO", logger="iamsafe")
    client.get(f"/?admin={ADMIN_TOKEN}")
    assert ADMIN_TOKEN not in caplog.text
