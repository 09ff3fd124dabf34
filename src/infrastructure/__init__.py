"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- persistence/: SQLAlchemy models, repositories and the Database wrapper
- security/: Token issuer and bcrypt password hashing
- logging/: structlog adapter
- enrichers/: User-agent parsing for session device info

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
