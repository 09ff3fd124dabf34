"""Container module - Centralized dependency injection.

Re-exports all factory functions from submodules:

    from src.core.container import get_session_manager, get_logger, ...

The container is organized into modules:
- infrastructure: Core services (database, logging, security)
- repositories: Repository factories
- auth_handlers: Services, handlers and the cleanup scheduler
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_database,
    get_db_session,
    get_device_enricher,
    get_logger,
    get_password_service,
    get_store_policy,
    get_token_issuer,
)

# Repositories
from src.core.container.repositories import (
    get_session_repository,
    get_user_repository,
)

# Services and handlers
from src.core.container.auth_handlers import (
    get_cleanup_scheduler,
    get_lockout_service,
    get_login_handler,
    get_logout_handler,
    get_session_manager,
)

__all__ = [
    # Infrastructure
    "get_database",
    "get_db_session",
    "get_device_enricher",
    "get_logger",
    "get_password_service",
    "get_store_policy",
    "get_token_issuer",
    # Repositories
    "get_session_repository",
    "get_user_repository",
    # Services and handlers
    "get_cleanup_scheduler",
    "get_lockout_service",
    "get_login_handler",
    "get_logout_handler",
    "get_session_manager",
]
