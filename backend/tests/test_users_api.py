"""
Foodies Backend — User API Tests
==================================

What:  Current profile and the follow / unfollow / list endpoints.
"""

import pytest

from foodies.models.favorite import Favorite


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_profile_counts(self, client, db_session, make_user, make_recipe, auth_headers):
        me = await make_user(db_session, name="Ana", email="Ana@Example.com")
        other = await make_user(db_session)
        recipe = await make_recipe(db_session, me)
        await make_recipe(db_session, me)
        db_session.add(Favorite(user_id=me.id, recipe_id=recipe.id))
        await db_session.commit()

        await client.post(f"/api/users/{other.id}/follow", headers=auth_headers(me))
        response = await client.get("/api/users/current", headers=auth_headers(me))

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "ana@example.com"
        assert body["recipes_count"] == 2
        assert body["favorites_count"] == 1
        assert body["following_count"] == 1
        assert body["followers_count"] == 0
        assert "password" not in body
        assert "token" not in body

    @pytest.mark.asyncio
    async def test_profile_requires_auth(self, client):
        response = await client.get("/api/users/current")
        assert response.status_code == 401


class TestFollows:

    @pytest.mark.asyncio
    async def test_follow_then_duplicate_then_unfollow(self, client, db_session, make_user, auth_headers):
        me = await make_user(db_session)
        chef = await make_user(db_session)
        await db_session.commit()
        headers = auth_headers(me)

        followed = await client.post(f"/api/users/{chef.id}/follow", headers=headers)
        again = await client.post(f"/api/users/{chef.id}/follow", headers=headers)
        followers = await client.get(f"/api/users/{chef.id}/followers")
        following = await client.get(f"/api/users/{me.id}/following")
        unfollowed = await client.delete(f"/api/users/{chef.id}/follow", headers=headers)
        unfollowed_again = await client.delete(f"/api/users/{chef.id}/follow", headers=headers)

        assert followed.status_code == 200
        assert followed.json()["user_id"] == chef.id
        assert again.status_code == 409
        assert [u["id"] for u in followers.json()["users"]] == [me.id]
        assert [u["id"] for u in following.json()["users"]] == [chef.id]
        assert unfollowed.status_code == 200
        assert unfollowed_again.status_code == 409

        after = await client.get(f"/api/users/{chef.id}/followers")
        assert after.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_cannot_follow_self(self, client, db_session, make_user, auth_headers):
        me = await make_user(db_session)
        await db_session.commit()

        response = await client.post(f"/api/users/{me.id}/follow", headers=auth_headers(me))

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "user_id"

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, client, db_session, make_user, auth_headers):
        me = await make_user(db_session)
        await db_session.commit()

        response = await client.post("/api/users/9999/follow", headers=auth_headers(me))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_followers_pagination(self, client, db_session, make_user, auth_headers):
        chef = await make_user(db_session)
        fans = [await make_user(db_session) for _ in range(3)]
        await db_session.commit()

        for fan in fans:
            await client.post(f"/api/users/{chef.id}/follow", headers=auth_headers(fan))

        page1 = await client.get(f"/api/users/{chef.id}/followers", params={"limit": 2})
        page2 = await client.get(f"/api/users/{chef.id}/followers", params={"limit": 2, "page": 2})
        bad = await client.get(f"/api/users/{chef.id}/followers", params={"page": 0})

        assert page1.json()["total"] == 3
        ids = [u["id"] for u in page1.json()["users"] + page2.json()["users"]]
        assert sorted(ids) == sorted(f.id for f in fans)
        assert bad.status_code == 400

    @pytest.mark.asyncio
    async def test_followers_of_unknown_user(self, client):
        response = await client.get("/api/users/9999/followers")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_out_of_range_numbers(self, client, db_session, make_user, auth_headers):
        chef = await make_user(db_session)
        fan = await make_user(db_session)
        await db_session.commit()
        await client.post(f"/api/users/{chef.id}/follow", headers=auth_headers(fan))

        far_page = await client.get(f"/api/users/{chef.id}/followers", params={"page": 10**18})
        huge_id = await client.get("/api/users/99999999999999999999/following")
        huge_follow = await client.post("/api/users/99999999999999999999/follow", headers=auth_headers(fan))

        assert far_page.status_code == 200
        assert far_page.json()["users"] == []
        assert far_page.json()["total"] == 1
        assert huge_id.status_code == 400
        assert huge_follow.status_code == 400
