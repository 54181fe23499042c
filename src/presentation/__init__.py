"""Presentation layer - API endpoints and HTTP concerns.

This layer contains FastAPI routers, middleware and RFC 7807 error
handling. It is thin: it calls application services and translates
results to HTTP responses.

Structure:
- api/middleware/: trace recording, phase timing, rate limiting
- routers/: resource routers and the health endpoint
"""
