"""
Foodies Backend — Application-Level Tests
===========================================

What:  Health check, request IDs, the shared error body and file serving
       guards, all of which sit outside any single resource.
"""

import pytest


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == "1.0.0"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, client):
        response = await client.get("/api/categories")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_client_id_is_echoed(self, client):
        response = await client.get("/api/recipes/999", headers={"X-Request-ID": "trace-42"})

        assert response.headers["x-request-id"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"


class TestErrorBody:

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_body(self, client):
        response = await client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert set(response.json()) >= {"error", "message", "request_id"}

    @pytest.mark.asyncio
    async def test_file_outside_storage_is_not_served(self, client):
        response = await client.get("/api/files/..%2F..%2F..%2Fetc%2Fpasswd")
        assert response.status_code in (400, 404)

    @pytest.mark.asyncio
    async def test_missing_file(self, client):
        response = await client.get("/api/files/recipes/2024/01/01/missing.png")
        assert response.status_code == 404
