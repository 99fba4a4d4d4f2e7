# =============================================================================
# tests/test_health.py - Health, Middleware & Static File Tests
# =============================================================================

from fastapi.testclient import TestClient

from app import __version__
from app.main import app


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "development"
        assert body["version"] == __version__

    def test_ready(self, client):
        response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["checks"]["database"] == "healthy"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_api_root(self, client):
        body = client.get("/api").json()
        assert body["health"] == "/api/v1/health"
        assert body["authenticated_as"] is None

    def test_api_root_ignores_bad_token(self, client):
        response = client.get("/api", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 200
        assert response.json()["authenticated_as"] is None


class TestMiddleware:
    def test_security_headers(self, client):
        response = client.get("/login/")

        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["referrer-policy"] == "same-origin"

    def test_session_cookie_name(self, client):
        client.get("/login/")
        assert "sessionid" in client.cookies

    def test_unknown_host_rejected(self, db):
        with TestClient(app, base_url="http://evil.example") as other:
            response = other.get("/api/v1/health")
        assert response.status_code == 400


class TestStaticFiles:
    def test_stylesheet_served(self, client):
        response = client.get("/static/css/site.css")

        assert response.status_code == 200
        assert "text/css" in response.headers["content-type"]

    def test_media_file_served(self, client):
        from app.config import settings

        (settings.MEDIA_ROOT / "hello.txt").write_text("hi")

        response = client.get("/media/hello.txt")

        assert response.status_code == 200
        assert response.text == "hi"
