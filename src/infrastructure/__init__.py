"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- SQLAlchemy repositories for counters, traces and alert history
- Alert channels (structured log, Sentry, SMTP email)
- Logging, error tracking, event bus and SSE fan-out
- Periodic maintenance scheduler

Structure:
- persistence/: Database engine, ORM models and repositories
- alerts/: Default alert rules and delivery channels
- rate_limit/: Default rate limit rules and path matching
- logging/, error_tracking/: structlog and Sentry adapters
- events/, sse/: In-process event bus and stream subscribers
- scheduler/: asyncio interval jobs

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
