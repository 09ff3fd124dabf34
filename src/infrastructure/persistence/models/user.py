"""User database model (credential subset).

Security:
    - password_hash: NEVER stores plaintext passwords (bcrypt hashed)
    - failed_login_attempts / locked_until: lockout counters, only ever
      changed through conditional UPDATE statements
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, UTCDateTime


class User(BaseMutableModel):
    """User model.

    Fields:
        id, created_at, updated_at: From BaseMutableModel
        email: Unique login identifier (stored lowercase)
        password_hash: Bcrypt hash
        roles: JSON list of role names (legacy rows may hold a bare string)
        is_active: Deactivated accounts never authenticate
        failed_login_attempts: Consecutive failures
        locked_until: Lock end, NULL when unlocked
        last_login_at: Last successful login

    Indexes:
        - ix_users_email: unique, login lookup
        - ix_users_locked_until: stale-lock sweep
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Login email (lowercase)",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt password hash",
    )

    roles: Mapped[list[str] | str] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: ["user"],
        comment="Role names",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether the account may authenticate",
    )

    failed_login_attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Consecutive failed logins",
    )

    locked_until: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=None,
        index=True,
        comment="Account locked until this time",
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=None,
        comment="Last successful login",
    )
