"""RFC 7807 Problem Details for HTTP APIs.

This module implements RFC 7807 (Problem Details for HTTP APIs) using Pydantic
models for structured error responses.

RFC 7807: https://tools.ietf.org/html/rfc7807

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 7807 compliant error response schema
    RateLimitProblem: 429 body with retry information
    problem_type: Build the ``type`` URI for an error slug
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PROBLEM_TYPE_BASE = "/errors"


def problem_type(slug: str) -> str:
    """Relative problem type URI, e.g. ``/errors/rate-limit-exceeded``."""
    return f"{PROBLEM_TYPE_BASE}/{slug}"


class ErrorDetail(BaseModel):
    """Individual field-specific error.

    Attributes:
        field: Name of the field with error
        code: Machine-readable error code
        message: Human-readable error message
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional list of field-specific errors (for validation failures)
        trace_id: Optional request trace ID for debugging

    Examples:
        >>> problem = ProblemDetails(
        ...     type="/errors/not-found",
        ...     title="Resource Not Found",
        ...     status=404,
        ...     detail="Alert 42 does not exist",
        ...     instance="/api/alerts/42/resolve",
        ... )
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str = Field(..., description="URI reference identifying this occurrence")
    errors: list[ErrorDetail] | None = Field(
        None, description="List of field-specific errors"
    )
    trace_id: str | None = Field(None, description="Request trace ID for debugging")

    def to_content(self) -> dict:
        """JSON body with camelCase members and empty members dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RateLimitProblem(ProblemDetails):
    """429 Too Many Requests body.

    Carries the legacy ``statusCode``/``message``/``retryAfter`` members
    next to the RFC 7807 ones so existing clients keep working.
    """

    status_code: int = Field(429, description="HTTP status code (legacy member)")
    message: str = Field("Rate limit exceeded", description="Legacy message")
    retry_after: int = Field(..., ge=0, description="Seconds until a retry is allowed")
