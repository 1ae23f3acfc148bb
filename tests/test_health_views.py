"""
Tests for the health endpoints.
"""

import pytest


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        data = response.get_json()

        assert response.status_code == 200
        assert data["status"] == "ok"
        assert data["server"] == "mercosur-trade-mcp"
        assert data["tier"] == "free"
        assert data["data_freshness"] == {"last_ingested": "2026-01-15", "source_count": 4}
        assert isinstance(data["uptime_seconds"], int)
        assert "trade_bloc_rules" in data["capabilities"]

    def test_git_sha_is_shortened(self, client, monkeypatch):
        monkeypatch.setenv("GIT_COMMIT_SHA", "0123456789abcdef")
        assert client.get("/health").get_json()["git_sha"] == "0123456"

    def test_git_sha_unknown(self, client, monkeypatch):
        monkeypatch.delenv("GIT_COMMIT_SHA", raising=False)
        assert client.get("/health").get_json()["git_sha"] == "unknown"

    def test_version(self, client):
        data = client.get("/health/version").get_json()

        assert data["status"] == "ok"
        assert data["transport"] == ["stdio", "streamable-http"]
        assert data["python_version"]
        assert data["mcp_sdk_version"]
        assert data["report_issue_url"].endswith("/issues/new")


class TestHealthWithoutDatabase:

    @pytest.fixture
    def client(self, missing_store):
        from mercosur_trade.web import create_app
        return create_app({"TESTING": True}).test_client()

    def test_pending_freshness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["data_freshness"] == {"last_ingested": "pending", "source_count": 0}
