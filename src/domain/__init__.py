"""Domain layer - Observability model.

Rate limit counters, request traces and alert history, plus the rules that
govern them. Nothing here imports a framework, an ORM or a network client.

Structure:
- entities/: Records with identity (counter entry, trace, alert history)
- value_objects/: Immutable rules, filters, timings and statistics
- protocols/: Repository, channel, logger and event bus ports
- events/: TraceCreated and AlertTriggered
- enums/, errors/: Strategies, metrics, channels and RateLimitExceededError
"""
