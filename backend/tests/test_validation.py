"""
Foodies Backend — Validation Layer Unit Tests
===============================================

What:  validate_body / validate_query dependencies and error formatting.
How:   Dependencies are called directly with hand-built Starlette requests,
       no app or database involved.
"""

import json
from urllib.parse import urlencode

import pytest
from starlette.requests import Request

from foodies.exceptions import ValidationError
from foodies.schemas.category import CategoryCreate
from foodies.schemas.common import MAX_OFFSET, PaginationParams, page_offset
from foodies.schemas.recipe import FavoriteRequest, RecipeCreate
from foodies.validation import format_pydantic_errors, validate_body, validate_query


def make_request(body: bytes = b"", content_type: str = "application/json", query: bytes = b""):
    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/",
        "query_string": query,
        "headers": [(b"content-type", content_type.encode())],
    }
    return Request(scope, receive)


VALID_RECIPE = {
    "title": "  Beef Stroganoff ",
    "description": "Creamy beef with mushrooms",
    "category": "Beef",
    "area": "Russian",
    "time": 40,
    "ingredients": [
        {"ingredient_id": "640c2dd963a319ea671e37aa", "quantity": "500g"},
        {"ingredientId": "640c2dd963a319ea671e3796", "quantity": "1 cup"},
    ],
    "instructions": "Brown the beef, add the sauce, simmer.",
}


class TestFormatErrors:

    def test_location_prefix_is_dropped(self):
        errors = format_pydantic_errors([
            {"loc": ("query", "page"), "msg": "Input should be a valid integer"},
            {"loc": ("body", "ingredients", 0, "quantity"), "msg": "Field required"},
        ])
        assert errors == [
            {"field": "page", "message": "Input should be a valid integer"},
            {"field": "ingredients.0.quantity", "message": "Field required"},
        ]

    def test_model_level_error(self):
        assert format_pydantic_errors([{"loc": (), "msg": "bad"}]) == [
            {"field": "__root__", "message": "bad"}
        ]


class TestValidateQuery:

    @pytest.mark.asyncio
    async def test_pagination_defaults(self):
        params = await validate_query(PaginationParams)(make_request())
        assert (params.page, params.limit) == (1, 10)

    @pytest.mark.asyncio
    async def test_pagination_coerces_strings(self):
        params = await validate_query(PaginationParams)(make_request(query=b"page=3&limit=5"))
        assert (params.page, params.limit) == (3, 5)
        assert page_offset(params.page, params.limit) == 10

    def test_offset_is_clamped_for_huge_pages(self):
        assert page_offset(10**18, 100) == MAX_OFFSET

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query,field", [
        (b"page=0", "page"),
        (b"page=-2", "page"),
        (b"page=abc", "page"),
        (b"page=1.5", "page"),
        (b"limit=0", "limit"),
        (b"limit=1000", "limit"),
    ])
    async def test_pagination_rejects_non_positive_or_non_integer(self, query, field):
        with pytest.raises(ValidationError) as exc_info:
            await validate_query(PaginationParams)(make_request(query=query))

        exc = exc_info.value
        assert exc.context["source"] == "query"
        assert [e["field"] for e in exc.errors] == [field]


class TestValidateBody:

    @pytest.mark.asyncio
    async def test_recipe_json_body(self):
        payload = await validate_body(RecipeCreate)(make_request(json.dumps(VALID_RECIPE).encode()))

        assert payload.title == "Beef Stroganoff"
        assert [i.ingredient_id for i in payload.ingredients] == [
            "640c2dd963a319ea671e37aa",
            "640c2dd963a319ea671e3796",
        ]

    @pytest.mark.asyncio
    async def test_recipe_form_body_with_encoded_ingredients(self):
        """Multipart forms send ingredients as a JSON string and time as text."""
        form = dict(VALID_RECIPE, time="40", ingredients=json.dumps(VALID_RECIPE["ingredients"]))
        body = urlencode(form)

        payload = await validate_body(RecipeCreate)(
            make_request(body.encode(), content_type="application/x-www-form-urlencoded")
        )

        assert payload.time == 40
        assert payload.ingredients[1].quantity == "1 cup"

    @pytest.mark.asyncio
    async def test_recipe_missing_fields_are_listed(self):
        body = {"title": "Soup", "time": 0, "ingredients": []}
        with pytest.raises(ValidationError) as exc_info:
            await validate_body(RecipeCreate)(make_request(json.dumps(body).encode()))

        fields = {e["field"] for e in exc_info.value.errors}
        assert {"description", "category", "area", "instructions", "time", "ingredients"} <= fields

    @pytest.mark.asyncio
    async def test_whitespace_title_counts_as_empty(self):
        body = dict(VALID_RECIPE, title="   ")
        with pytest.raises(ValidationError) as exc_info:
            await validate_body(RecipeCreate)(make_request(json.dumps(body).encode()))
        assert [e["field"] for e in exc_info.value.errors] == ["title"]

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        with pytest.raises(ValidationError, match="valid JSON"):
            await validate_body(FavoriteRequest)(make_request(b"{recipe_id: 1"))

    @pytest.mark.asyncio
    async def test_favorite_request_accepts_camel_case(self):
        body = await validate_body(FavoriteRequest)(make_request(b'{"recipeId": 4}'))
        assert body.recipe_id == 4

    @pytest.mark.asyncio
    async def test_category_thumb_must_be_url(self):
        body = json.dumps({"name": "Vegan", "thumb": "not a url"}).encode()
        with pytest.raises(ValidationError) as exc_info:
            await validate_body(CategoryCreate)(make_request(body))
        assert [e["field"] for e in exc_info.value.errors] == ["thumb"]
