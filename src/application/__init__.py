"""Application layer - Use cases and orchestration.

This layer contains the application's use cases:
- Commands: Login, logout and logout-all requests
- Services: Credential lockout, session lifecycle and cleanup scheduling
- DTOs: Results handed back to the presentation layer

Structure:
- commands/: Command dataclasses and handlers
- services/: Long-lived services the handlers and routers call
- dtos/: Result dataclasses

The application layer orchestrates domain logic but contains no business rules.
"""
