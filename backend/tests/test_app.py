"""
Tests for application-wide behavior: root/health, CORS, global rate limit and error bodies.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from freesip.core.rate_limit import RateLimiter
from freesip.db.session import get_db
from freesip.main import create_app

ALLOWED_ORIGIN = "https://freesip-test.netlify.app"


def _failing_db():
    raise AssertionError("store must not be touched")


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Contact Form API Server"
        assert body["status"] == "Running"
        assert body["timestamp"].endswith("Z")

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["uptime"] >= 0
        assert "timestamp" in body

    def test_root_and_health_never_touch_the_store(self, app, client):
        app.dependency_overrides[get_db] = _failing_db

        for _ in range(3):
            assert client.get("/").status_code == 200
            assert client.get("/health").status_code == 200


class TestErrorBodies:
    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Endpoint not found"}

    def test_wrong_method_is_reported_as_unknown_route(self, client):
        response = client.get("/api/contact/submit")

        assert response.status_code == 404
        assert response.json()["message"] == "Endpoint not found"

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/contact/submit",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unhandled_exception_is_not_leaked(self, app):
        def exploding_db():
            raise RuntimeError("secret connection string")

        app.dependency_overrides[get_db] = exploding_db
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/contacts")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        assert "secret" not in response.text


class TestCors:
    def test_allowed_origin_is_echoed(self, client):
        response = client.get("/", headers={"Origin": ALLOWED_ORIGIN})

        assert response.headers["Access-Control-Allow-Origin"] == ALLOWED_ORIGIN
        assert response.headers["Access-Control-Allow-Credentials"] == "true"
        assert "POST" in response.headers["Access-Control-Allow-Methods"]
        assert "X-Requested-With" in response.headers["Access-Control-Allow-Headers"]

    def test_unknown_origin_gets_no_cors_headers(self, client):
        response = client.get("/", headers={"Origin": "https://evil.example"})

        assert response.status_code == 200
        assert "Access-Control-Allow-Origin" not in response.headers

    def test_preflight_on_any_path(self, client):
        response = client.options(
            "/api/contact/submit",
            headers={"Origin": "http://localhost:5500", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5500"

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


class TestGlobalRateLimit:
    def test_api_calls_are_capped_per_ip(self, session_factory, clock):
        app = create_app(
            api_limiter=RateLimiter(3, 15 * 60, clock=clock),
            contact_limiter=RateLimiter(5, 60 * 60, clock=clock),
        )

        def override_get_db():
            session = session_factory()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = override_get_db
        client = TestClient(app)

        for _ in range(3):
            assert client.get("/api/contacts").status_code == 200
        response = client.get("/api/contacts")

        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "message": "Too many requests from this IP, please try again later.",
        }
        assert client.get("/health").status_code == 200
        assert client.get("/api/contacts", headers={"X-Forwarded-For": "192.0.2.9"}).status_code == 200

        clock.advance(15 * 60)
        assert client.get("/api/contacts").status_code == 200
