"""Tests for the FastAPI formatting endpoint (local engine only, no network)."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest
from fastapi.testclient import TestClient

from smart_format.web.app import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestWebApi:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_format_list(self, client):
        response = client.post("/api/format", json={"text": "- one\n- two", "local_only": True})
        assert response.status_code == 200
        body = response.json()
        assert body["classifier"] == "local"
        assert body["elements"][0]["type"] == "ul"
        assert body["elements"][0]["items"] == ["one", "two"]
        assert "<ul" in body["html"]
        assert body["warning"] is None

    def test_overrides_and_toc(self, client):
        payload = {
            "text": "Report\n\n1. Scope\n\nThe scope covers feeders and substations.",
            "local_only": True,
            "include_toc": True,
            "overrides": {"h2": {"color": "#003366"}},
        }
        body = client.post("/api/format", json=payload).json()
        assert body["html"].startswith('<div class="toc-container"')
        assert "color: #003366;" in body["html"]

    def test_empty_text_rejected(self, client):
        response = client.post("/api/format", json={"text": "   ", "local_only": True})
        assert response.status_code == 400

    def test_bad_payload(self, client):
        response = client.post("/api/format", json={"text": "x", "overrides": "big"})
        assert response.status_code == 422
