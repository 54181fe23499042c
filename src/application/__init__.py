"""Application layer - Use cases and orchestration.

Structure:
- services/: Rate limiting, trace recording and alert evaluation

The application layer orchestrates domain logic over repository and
channel ports; it never touches the ORM directly.
"""
