"""
Foodies Backend — Shared Request/Response Schemas
===================================================

What:  Pydantic models reused across resources: pagination input, the
       error body and the health payload.
Why:   Every list endpoint paginates the same way and every error looks the
       same to the frontend.
"""

from typing import Optional

from pydantic import BaseModel, Field

from foodies.config import settings

# Primary keys are 32-bit INTEGER columns
MAX_ID = 2**31 - 1

# Offsets past this can only ever return an empty page
MAX_OFFSET = 2**31 - 1


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based page, clamped to what the database accepts."""
    return min((page - 1) * limit, MAX_OFFSET)


# ══════════════════════════════════════════════════════════════════════════
# Query Parameter Models
# ══════════════════════════════════════════════════════════════════════════


class PaginationParams(BaseModel):
    """
    What:  Validated page/limit query parameters.
    How:   Read by validate_query(PaginationParams); values arrive as strings
           and pydantic coerces them. "abc", "1.5", "0" and "-3" all fail
           and the request is answered with 400 before the service runs.
           There is no upper bound on page: services clamp the offset with
           page_offset(), so a page far past the end is simply empty.

    Parameters:
        page:  1-based page number (default 1)
        limit: Items per page (default 10, max settings.max_page_size)
    """
    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Fields:
        error: Machine-readable code (validation_error, unauthorized,
               forbidden, not_found, conflict, server_error,
               internal_server_error)
        message: Human-readable description
        details: Optional extra context; validation errors put the
                 field-level list under details.errors
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for container and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
