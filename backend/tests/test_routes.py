"""
Tests for the read-only HTTP endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from jps_optimize.main import create_app


@pytest.fixture
def client(config, presets_dir):
    return TestClient(create_app(config))


class TestPresetsEndpoint:
    """GET /api/presets"""

    def test_list(self, client):
        response = client.get("/api/presets")

        assert response.status_code == 200
        presets = response.json()["presets"]
        assert presets[0]["name"] == "woo"
        assert presets[0]["description"] == "WooCommerce stores"

    def test_missing_directory(self, config):
        client = TestClient(create_app(config))

        response = client.get("/api/presets")

        assert response.status_code == 404
        assert "Presets directory not found" in response.json()["error"]


class TestValidationEndpoint:
    """GET /api/sites/{domain}/validation?preset=..."""

    def test_drift(self, client, make_site):
        make_site(wordpress=False)

        response = client.get("/api/sites/example.com/validation", params={"preset": "woo"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "WARN"
        assert data["exit_code"] == 1
        subjects = [e["subject"] for e in data["entries"] if e["status"] == "WARN"]
        assert subjects == ["memory_limit", "max_execution_time"]

    def test_unknown_preset(self, client, make_site):
        make_site(wordpress=False)

        response = client.get("/api/sites/example.com/validation", params={"preset": "blog"})

        assert response.status_code == 404

    def test_unknown_site(self, client):
        response = client.get("/api/sites/nowhere.com/validation", params={"preset": "woo"})

        assert response.status_code == 404
        assert response.json()["error"] == "Site not found: nowhere.com"

    def test_preset_required(self, client):
        assert client.get("/api/sites/example.com/validation").status_code == 422


class TestReportEndpoint:
    """GET /api/sites/{domain}/report"""

    def test_report(self, client, make_site):
        make_site(wordpress=False)

        response = client.get("/api/sites/example.com/report", params={"preset": "woo"})

        assert response.status_code == 200
        data = response.json()
        assert data["target"] == "example.com"
        assert data["preset"] == "woo"
        assert data["settings"]["memory_limit"] == "256M"

    def test_report_without_preset(self, client, make_site):
        make_site(wordpress=False)

        data = client.get("/api/sites/example.com/report").json()

        assert data["preset"] == "unknown"

    def test_unknown_site(self, client):
        assert client.get("/api/sites/nowhere.com/report").status_code == 404
