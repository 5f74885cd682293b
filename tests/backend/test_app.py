from fastapi.testclient import TestClient

from backend.app.main import create_app


def test_health(test_app_client):
    resp = test_app_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_readiness_reports_database(test_app_client):
    resp = test_app_client.get("/health/ready")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ready", "checks": {"database": True}}


def test_readiness_without_database(test_app_client, test_db):
    test_db.reset()

    resp = test_app_client.get("/health/ready")

    assert resp.status_code == 503
    assert resp.json()["status"] == "not_ready"


def test_request_id_is_generated_and_echoed(test_app_client):
    generated = test_app_client.get("/health")
    assert len(generated.headers["x-request-id"]) == 32

    echoed = test_app_client.get("/health", headers={"X-Request-ID": "trace-me-123"})
    assert echoed.headers["x-request-id"] == "trace-me-123"


def test_unknown_route_uses_error_envelope(test_app_client):
    resp = test_app_client.get("/api/nothing-here")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Not Found"}


def _app_with_failing_route(settings):
    app = create_app(settings)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    return app


def test_unhandled_error_hides_details(test_db, settings):
    with TestClient(_app_with_failing_route(settings), raise_server_exceptions=False) as client:
        resp = client.get("/boom")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}


def test_unhandled_error_includes_stack_in_debug(test_db, settings):
    debug_settings = settings.model_copy(update={"debug": True})

    with TestClient(_app_with_failing_route(debug_settings), raise_server_exceptions=False) as client:
        resp = client.get("/boom")

    assert resp.status_code == 500
    assert "kaboom" in resp.json()["stack"]


def test_routes_are_mounted_under_api_prefix(test_db, settings):
    app = create_app(settings.model_copy(update={"api_prefix": "/v2"}))

    with TestClient(app) as client:
        assert client.post("/v2/auth/logout").status_code == 401
        assert client.post("/api/auth/logout").status_code == 404
