"""Commands - Write operations that change state.

Commands represent user intent to perform an action. They are immutable
dataclasses with imperative names (LoginUser, LogoutUser).

Each command has a corresponding handler that contains the business logic
to execute the command.
"""

from src.application.commands.auth_commands import (
    LoginUser,
    LogoutAllSessions,
    LogoutUser,
)

__all__ = [
    "LoginUser",
    "LogoutAllSessions",
    "LogoutUser",
]
