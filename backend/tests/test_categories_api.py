"""
Foodies Backend — Category API Tests
======================================
"""

import pytest

from foodies.models.category import Category


class TestCategoriesApi:

    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, client, db_session):
        db_session.add_all([Category(name="Vegan"), Category(name="Beef"), Category(name="Dessert")])
        await db_session.commit()

        response = await client.get("/api/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()["categories"]] == ["Beef", "Dessert", "Vegan"]

    @pytest.mark.asyncio
    async def test_create(self, client, db_session, make_user, auth_headers):
        user = await make_user(db_session)
        await db_session.commit()

        response = await client.post(
            "/api/categories",
            json={
                "name": " Seafood ",
                "description": "Fish and shellfish",
                "thumb": "https://cdn.example.com/seafood.png",
            },
            headers=auth_headers(user),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Seafood"
        assert body["thumb"] == "https://cdn.example.com/seafood.png"

    @pytest.mark.asyncio
    async def test_create_requires_auth(self, client):
        response = await client.post("/api/categories", json={"name": "Seafood"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_duplicate_name(self, client, db_session, make_user, auth_headers):
        user = await make_user(db_session)
        db_session.add(Category(name="Seafood"))
        await db_session.commit()

        response = await client.post(
            "/api/categories", json={"name": "seafood"}, headers=auth_headers(user)
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"name": "   "}, {"name": "Soup", "thumb": "ftp:/nope"}])
    async def test_create_invalid(self, client, db_session, make_user, auth_headers, body):
        user = await make_user(db_session)
        await db_session.commit()

        response = await client.post("/api/categories", json=body, headers=auth_headers(user))

        assert response.status_code == 400
        assert response.json()["details"]["errors"]
