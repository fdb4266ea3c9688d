"""
API tests for health endpoints.
"""


class TestHealth:

    def test_liveness(self, client):
        data = client.get("/health").json()

        assert data["status"] == "ok"
        assert data["details"]["mock_mode"] is True

    def test_readiness_in_mock_mode(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_readiness_reports_missing_configuration(self, client, settings):
        settings.snowflake_mock_mode = False

        response = client.get("/health/ready")

        assert response.status_code == 503
        checks = {c["name"]: c for c in response.json()["checks"]}
        assert checks["configuration"]["status"] == "error"
        assert checks["database"]["status"] == "ok"
