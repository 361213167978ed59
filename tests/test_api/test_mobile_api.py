"""Tests for the mock mobile API controllers"""

from fastapi.testclient import TestClient
from mock_backend.main import app

client = TestClient(app)


class TestCatalog:
    """Tests for hydrate and sync"""

    def test_hydrate_is_stable(self):
        first = client.get("/mobile-api/v1/catalog/hydrate").json()
        second = client.get("/mobile-api/v1/catalog/hydrate").json()

        assert len(first["data"]["events"]) == 2
        assert len(first["data"]["listings"]) == 6
        assert first["data"]["listings"] == second["data"]["listings"]
        assert "last_modified" in first

    def test_sync_requires_since(self):
        response = client.get("/mobile-api/v1/catalog/sync")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required parameter: since"}

    def test_sync(self):
        data = client.get("/mobile-api/v1/catalog/sync", params={"since": "2025-01-01T00:00:00Z"}).json()
        assert data["data"] == {"events": [], "listings": [], "media": []}
        assert data["pagination"]["has_more"] is False


class TestChanges:
    """Tests for POST /catalog/changes"""

    def test_create_returns_server_id(self):
        response = client.post(
            "/mobile-api/v1/catalog/changes",
            json={"changes": {"media": [{"temp_id": "tmp-1", "action": "create"}]}}
        )

        assert response.status_code == 200
        media = response.json()["data"]["media"][0]
        assert media["temp_id"] == "tmp-1"
        assert media["id"].startswith("media_")
        assert media["status"] == "success"

    def test_invalid_action(self):
        response = client.post(
            "/mobile-api/v1/catalog/changes",
            json={"changes": {"events": [{"id": "E1", "action": "explode"}]}}
        )
        event = response.json()["data"]["events"][0]
        assert event["status"] == "error"
        assert event["errors"] == ["Invalid action: explode"]

    def test_empty_changes(self):
        response = client.post("/mobile-api/v1/catalog/changes", json={"changes": {}})
        assert response.status_code == 422

    def test_malformed_changes(self):
        for body in ({"changes": [{"id": 1}]}, {"changes": "x"}):
            assert client.post("/mobile-api/v1/catalog/changes", json=body).status_code == 422

    def test_collection_must_be_array(self):
        response = client.post("/mobile-api/v1/catalog/changes", json={"changes": {"listings": {"id": "L1"}, "media": []}})

        assert response.status_code == 422
        assert response.json()["errors"] == {"changes.listings": ["Must be an array."]}


class TestUploads:
    """Tests for request-upload and the mock S3 endpoint"""

    def test_request_upload(self):
        response = client.post(
            "/mobile-api/v1/catalog/request-upload",
            json={"media": [{"identifier": "A", "filename": "a.jpg", "content_type": "image/jpeg", "size": 1}]}
        )

        assert response.status_code == 200
        upload = response.json()["data"][0]
        assert upload["identifier"] == "A"
        assert "/mock-s3-upload/" in upload["upload_url"]

    def test_request_upload_requires_media(self):
        assert client.post("/mobile-api/v1/catalog/request-upload", json={}).status_code == 422

    def test_mock_s3_upload(self):
        response = client.put("/mock-s3-upload/abc", content=b"12345")

        assert response.status_code == 200
        data = response.json()
        assert data["Key"] == "abc"
        assert data["Bucket"] == "mock-bucket"
        assert data["Size"] == 5


class TestServiceEndpoints:
    """Tests for / and /health"""

    def test_root(self):
        data = client.get("/").json()
        assert data["status"] == "operational"
        assert data["test_scenarios_enabled"] is True

    def test_health(self):
        assert client.get("/health").json()["status"] == "healthy"

    def test_lifespan_loads_scenarios(self, caplog):
        caplog.set_level("INFO")

        with TestClient(app) as started:
            assert started.get("/health").status_code == 200

        assert "test scenarios from" in caplog.text
