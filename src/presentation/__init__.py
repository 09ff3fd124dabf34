"""Presentation layer - API endpoints and HTTP concerns.

This layer contains FastAPI routers and endpoint definitions. The presentation
layer is thin - it dispatches commands to the application layer and
translates results to HTTP responses.

Structure:
- routers/system.py: Root and health endpoints
- routers/api/middleware/: Trace IDs, token transport, authentication gate
- routers/api/v1/: API version 1 endpoints (sessions, admin cleanup)

The presentation layer depends on the application layer but contains NO
business logic.
"""
