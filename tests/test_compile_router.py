"""Tests for the /compile, /validate and /site-title endpoints."""

import io
import json
import zipfile

import pytest
from fastapi.testclient import TestClient

from sitegen.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counter before every test."""
    app.state.limiter._storage.reset()
    yield


_BUNDLE = {
    "domain": {"id": "d1", "domain": "bestlawyers.com", "niche": "legal"},
    "articles": [
        {
            "id": "a1",
            "slug": "car-accidents",
            "title": "Car Accidents",
            "content_markdown": "What to do after a crash.",
            "status": "published",
        }
    ],
}


class TestCompileEndpoint:
    def test_json_response(self):
        response = client.post("/compile", json=_BUNDLE)
        assert response.status_code == 200
        data = response.json()
        assert data["domain"] == "bestlawyers.com"
        assert data["mode"] == "v1"
        assert data["file_count"] == len(data["files"])
        assert "car-accidents/index.html" in {f["path"] for f in data["files"]}

    def test_malformed_payload_still_compiles(self):
        bundle = {
            **_BUNDLE,
            "articles": _BUNDLE["articles"]
            + [
                {
                    "id": "a2",
                    "slug": "fee-calculator",
                    "title": "Fee Calculator",
                    "content_type": "calculator",
                    "status": "published",
                    "calculator_config": {"inputs": [{"id": "hours", "label": "Hours", "type": "slider"}]},
                }
            ],
        }
        response = client.post("/compile", json=bundle)
        assert response.status_code == 200
        paths = {f["path"] for f in response.json()["files"]}
        assert {"car-accidents/index.html", "fee-calculator/index.html"} <= paths

    def test_missing_domain_is_404(self):
        response = client.post("/compile", json={"articles": []})
        assert response.status_code == 404
        assert response.json()["detail"] == "Domain not found"

    def test_invalid_body_is_422(self):
        response = client.post("/compile", json={"articles": [{"slug": "no-id"}]})
        assert response.status_code == 422

    def test_zip_response(self):
        response = client.post("/compile?format=zip", json=_BUNDLE)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="bestlawyers-com-site.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            manifest = json.loads(zf.read("manifest.json"))
            assert manifest["domain"] == "bestlawyers.com"
            assert "car-accidents/index.html" in zf.namelist()
            assert zf.read("robots.txt").decode().startswith("User-agent: *")

    def test_rate_limit(self):
        for _ in range(10):
            assert client.post("/site-title", json={"hostname": "x.com"}).status_code == 200
        assert client.post("/site-title", json={"hostname": "x.com"}).status_code == 429


class TestValidateEndpoint:
    def test_report(self):
        body = {"domain": "bestlawyers.com", "pages": [{"id": "p1", "route": "/"}]}
        response = client.post("/validate", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is False
        codes = [issue["code"] for issue in data["issues"]]
        assert "missing_compliance" in codes
        assert "no_homepage" not in codes


class TestSiteTitleEndpoint:
    def test_title(self):
        response = client.post("/site-title", json={"hostname": "my-seo-tools.co.uk"})
        assert response.status_code == 200
        assert response.json() == {"hostname": "my-seo-tools.co.uk", "title": "My SEO Tools"}

    def test_empty_hostname_rejected(self):
        assert client.post("/site-title", json={"hostname": ""}).status_code == 422


class TestRoot:
    def test_health(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Hello from Sitegen"}
