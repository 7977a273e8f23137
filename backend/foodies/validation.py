"""
Foodies Backend — Request Validation Layer
============================================

What:  Dependency factories that validate request input against a pydantic
       schema before the route handler (and therefore any service) runs.
Why:   One validation path for every input source, one error format for
       every failure: HTTP 400 with a list of field-level messages.
How:   validate_body(Schema) / validate_query(Schema) return async callables
       for Depends(). Each collects raw input from its source, validates it,
       and either returns the parsed model or raises ValidationError.

Input sources:
    body  → JSON object, or form fields for multipart/form-data and
            application/x-www-form-urlencoded (file parts are skipped; the
            route receives those through File())
    query → query string parameters

Example:
    @router.get("/favorites")
    async def list_favorites(
        pagination: PaginationParams = Depends(validate_query(PaginationParams)),
    ): ...

FastAPI's own RequestValidationError (path parameters, File() parts) is
converted into the same error body by main.register_exception_handlers via
format_pydantic_errors below.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from foodies.exceptions import ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

# Location prefixes FastAPI adds that mean nothing to API consumers
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def format_pydantic_errors(errors: Iterable[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into [{"field": "a.b", "message": "..."}].

    loc tuples like ("ingredients", 0, "quantity") become
    "ingredients.0.quantity"; a leading source marker ("query", "path") is
    dropped. Model-level errors (empty loc) are reported under "__root__".
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        formatted.append({
            "field": ".".join(loc) or "__root__",
            "message": str(error.get("msg", "Invalid value")),
        })
    return formatted


def _validate(schema: Type[SchemaT], data: Any, source: str) -> SchemaT:
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        errors = format_pydantic_errors(exc.errors())
        logger.debug("Rejected %s for %s: %s", source, schema.__name__, errors)
        raise ValidationError(
            message="Request validation failed",
            errors=errors,
            context={"source": source},
        )


async def _read_body(request: Request) -> Any:
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        # Starlette caches the parsed form on the request, so File() params
        # of the same handler still see the uploaded parts.
        return {
            key: value
            for key, value in form.items()
            if not isinstance(value, UploadFile)
        }

    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(
            message="Request body must be valid JSON",
            errors=[{"field": "__root__", "message": "Malformed JSON"}],
            context={"source": "body"},
        )


def validate_body(schema: Type[SchemaT]) -> Callable[[Request], Awaitable[SchemaT]]:
    """Dependency factory: validate the request body against `schema`."""

    async def dependency(request: Request) -> SchemaT:
        data = await _read_body(request)
        return _validate(schema, data, source="body")

    dependency.__name__ = f"validate_body_{schema.__name__}"
    return dependency


def validate_query(schema: Type[SchemaT]) -> Callable[[Request], Awaitable[SchemaT]]:
    """Dependency factory: validate query string parameters against `schema`."""

    async def dependency(request: Request) -> SchemaT:
        data = dict(request.query_params)
        return _validate(schema, data, source="query")

    dependency.__name__ = f"validate_query_{schema.__name__}"
    return dependency
