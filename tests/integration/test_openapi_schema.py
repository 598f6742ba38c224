"""Integration tests for the OpenAPI schema and Swagger UI."""

import pytest

pytestmark = pytest.mark.integration


class TestOpenApiSchema:
    def test_schema_lists_order_paths(self, api_client):
        response = api_client.get("/api/schema/", HTTP_ACCEPT="application/json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/orders" in paths
        assert "/orders/{id}" in paths
        assert set(paths["/orders"]) == {"get", "post"}

    def test_swagger_ui(self, client):
        response = client.get("/api/docs/")
        assert response.status_code == 200
