"""Application environment types.

Defines the runtime environments Keyhold knows about. Settings uses them to
pick environment-specific behavior (log rendering, secure cookies).

Environments:
- DEVELOPMENT: Local development, human-readable logs
- TESTING: Automated test execution against an isolated database
- CI: Continuous integration runs
- PRODUCTION: Secure cookies, JSON logs
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
