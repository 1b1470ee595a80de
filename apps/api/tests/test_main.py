"""
Tests for the application entry point routes.

The lifespan is not run, so no database, Redis or browser is needed.
"""

from fastapi.testclient import TestClient

from citd_registration.main import APPLICATION_FORM_PATH, app

client = TestClient(app)


class TestEntryPoint:
    """Tests for root, health and static routes."""

    def test_root_redirects_to_application_form(self):
        response = client.get("/", follow_redirects=False)

        assert response.status_code in (302, 307)
        assert response.headers["location"] == APPLICATION_FORM_PATH

    def test_health(self):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/ready").json() == {"status": "ready"}

    def test_application_form_is_served(self):
        response = client.get(APPLICATION_FORM_PATH)

        assert response.status_code == 200
        assert 'id="applicant-name"' in response.text

    def test_debug_redis_without_limiter(self):
        assert client.get("/debug/redis").json() == {"redis": "not initialized"}
