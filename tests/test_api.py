"""
Tests for the REST API of the Tagging Service.
"""
import pytest
from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient

from domain.entities.events import TagAdded
from domain.exceptions import TaggingStoreError
from main import app
from utils.dependencies import (
    get_db,
    get_tag_catalog_service,
    get_tag_query_service,
    get_tagging_service,
)


@pytest.fixture
def client(db, tagging_service, query_service, catalog_service):
    """Test client bound to the in-memory database.

    The client is not entered as a context manager so the lifespan does not
    create tables on the configured database.
    """
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_tagging_service] = lambda: tagging_service
    app.dependency_overrides[get_tag_query_service] = lambda: query_service
    app.dependency_overrides[get_tag_catalog_service] = lambda: catalog_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "tagging-service",
        "database": "reachable",
    }


class TestSubjectTags:
    """Tests for the /subjects/{type}/{id}/tags endpoints."""

    def test_attach_and_get(self, client, received):
        response = client.post("/subjects/article/1/tags", json={"tags": "News, Sports"})

        assert response.status_code == 200
        assert response.json() == {
            "subject_type": "article",
            "subject_id": "1",
            "added": ["news", "sports"],
            "removed": [],
        }
        assert len(received(TagAdded)) == 2

        response = client.get("/subjects/article/1/tags")
        assert response.json()["tag_names"] == ["News", "Sports"]
        assert response.json()["tag_slugs"] == ["news", "sports"]

    def test_attach_list_input(self, client):
        response = client.post("/subjects/article/1/tags", json={"tags": [" News ", "news"]})

        assert response.json()["added"] == ["news"]

    def test_attach_requires_tags(self, client):
        response = client.post("/subjects/article/1/tags", json={})

        assert response.status_code == 422

    def test_replace(self, client):
        client.post("/subjects/article/1/tags", json={"tags": ["a", "b"]})

        response = client.put("/subjects/article/1/tags", json={"tags": ["b", "c"]})

        assert response.status_code == 200
        assert response.json()["added"] == ["c"]
        assert response.json()["removed"] == ["a"]

    def test_detach_named_tags(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "a, b"})

        response = client.delete("/subjects/article/1/tags", params={"tags": "a"})

        assert response.json()["removed"] == ["a"]
        assert client.get("/subjects/article/1/tags").json()["tag_slugs"] == ["b"]

    def test_detach_all(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "a, b"})

        response = client.delete("/subjects/article/1/tags")

        assert sorted(response.json()["removed"]) == ["a", "b"]

    def test_subject_deleted(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "a"})

        response = client.delete("/subjects/article/1")

        assert response.status_code == 200
        assert response.json()["removed"] == ["a"]
        assert client.get("/tags/a").json()["count"] == 0

    def test_configuration_error_maps_to_500(self, client, make_tagging_service):
        def broken(value):
            raise RuntimeError("boom")

        app.dependency_overrides[get_tagging_service] = lambda: make_tagging_service(
            normalizer=broken
        )

        response = client.post("/subjects/article/1/tags", json={"tags": "a"})

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Tagging configuration error")

    def test_store_error_maps_to_503(self, client):
        failing_service = Mock()
        failing_service.attach = AsyncMock(
            side_effect=TaggingStoreError("Failed to tag article:1 with 'a'")
        )
        app.dependency_overrides[get_tagging_service] = lambda: failing_service

        response = client.post("/subjects/article/1/tags", json={"tags": "a"})

        assert response.status_code == 503
        assert response.json()["detail"] == "Failed to tag article:1 with 'a'"


class TestSubjectFilter:
    """Tests for GET /subjects/{type}."""

    @pytest.fixture(autouse=True)
    def tagged(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "x, y"})
        client.post("/subjects/article/2/tags", json={"tags": "y"})
        client.post("/subjects/article/3/tags", json={"tags": "z"})

    def test_all_tags(self, client):
        response = client.get("/subjects/article", params={"all_tags": "x, y"})

        assert response.json() == {
            "subject_type": "article",
            "mode": "all",
            "unfiltered": False,
            "subject_ids": ["1"],
        }

    def test_any_tags(self, client):
        response = client.get("/subjects/article", params={"any_tags": "x,z"})

        assert response.json()["mode"] == "any"
        assert response.json()["subject_ids"] == ["1", "3"]

    def test_no_tags_is_unfiltered(self, client):
        response = client.get("/subjects/article")

        assert response.json()["unfiltered"] is True
        assert response.json()["subject_ids"] == []

    def test_empty_any_tags_matches_nothing(self, client):
        response = client.get("/subjects/article", params={"any_tags": ""})

        assert response.json()["unfiltered"] is False
        assert response.json()["subject_ids"] == []

    def test_both_filters_rejected(self, client):
        response = client.get(
            "/subjects/article", params={"all_tags": "x", "any_tags": "y"}
        )

        assert response.status_code == 400


class TestTagCatalog:
    """Tests for the /tags endpoints."""

    def test_existing_tags(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "news, sports"})
        client.post("/subjects/article/2/tags", json={"tags": "news"})
        client.post("/subjects/photo/1/tags", json={"tags": "travel"})

        response = client.get("/tags", params={"subject_type": "article"})

        assert response.status_code == 200
        assert response.json() == [
            {"slug": "news", "name": "News", "count": 2, "suggest": False},
            {"slug": "sports", "name": "Sports", "count": 1, "suggest": False},
        ]

    def test_existing_tags_requires_subject_type(self, client):
        assert client.get("/tags").status_code == 422

    def test_get_tag_not_found(self, client):
        response = client.get("/tags/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Tag 'missing' not found"

    def test_suggestions(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "news"})

        response = client.put("/tags/news/suggest", json={"suggest": True})

        assert response.status_code == 200
        assert response.json()["suggest"] is True
        assert [tag["slug"] for tag in client.get("/tags/suggested").json()] == ["news"]

    def test_suggest_missing_tag(self, client):
        response = client.put("/tags/missing/suggest", json={"suggest": True})

        assert response.status_code == 404

    def test_delete_unused(self, client):
        client.post("/subjects/article/1/tags", json={"tags": "a, b"})
        client.delete("/subjects/article/1/tags", params={"tags": "a"})

        response = client.delete("/tags/unused")

        assert response.status_code == 200
        assert response.json()["deleted"] == 1
        assert client.get("/tags/a").status_code == 404
        assert client.get("/tags/b").status_code == 200
