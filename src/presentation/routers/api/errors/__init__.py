"""RFC 7807 error response schemas and exception handlers.

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 7807 compliant error response schema
    RateLimitProblem: 429 response body
    problem_type: Problem type URI builder
    register_exception_handlers: Register global exception handlers with FastAPI
"""

from src.presentation.routers.api.errors.exception_handlers import (
    register_exception_handlers,
)
from src.presentation.routers.api.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
    RateLimitProblem,
    problem_type,
)

__all__ = [
    "ErrorDetail",
    "ProblemDetails",
    "RateLimitProblem",
    "problem_type",
    "register_exception_handlers",
]
