"""Application environment types.

Used by Settings to pick environment-specific behavior (log rendering,
scheduler startup).

Environments:
- DEVELOPMENT: Local development, human-readable console logs
- TESTING: Automated test execution with an isolated database
- CI: Continuous integration environment
- PRODUCTION: Production deployment, JSON logs
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
