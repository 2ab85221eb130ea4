"""
Authentication business logic: signup, login and user lookups.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from wordgame.auth.password import (
    hash_password,
    rehash_if_needed,
    validate_password_strength,
    verify_password,
)
from wordgame.db.models import ROLES, User
from wordgame.errors import Conflict, InvalidInput

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

SIGNUP_ROLES = ("student", "teacher")


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower().strip()))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Signup / login
# ---------------------------------------------------------------------------


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    full_name: str,
    role: str = "student",
    allowed_roles: tuple[str, ...] = SIGNUP_ROLES,
) -> User:
    """
    Create an account with zero points at level 1.

    Raises:
        PasswordStrengthError: Weak password.
        InvalidInput: Empty name or a role that cannot self-register.
        Conflict: Email already registered.
    """
    validate_password_strength(password)

    if not full_name.strip():
        msg = "Full name is required"
        raise InvalidInput(msg)
    if role not in ROLES or role not in allowed_roles:
        msg = f"Role '{role}' cannot be registered here"
        raise InvalidInput(msg)

    if await get_user_by_email(db, email) is not None:
        msg = "User already exists"
        raise Conflict(msg)

    now = datetime.now(timezone.utc)
    user = User(
        email=email.lower().strip(),
        password_hash=hash_password(password),
        full_name=full_name.strip(),
        role=role,
        points=0,
        level=1,
        level_progress=0,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "User already exists"
        raise Conflict(msg) from e

    logger.info("user_created", user_id=user.id, role=role)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user when the credentials match, otherwise None."""
    user = await get_user_by_email(db, email)
    if user is None:
        # Hash anyway so response time does not reveal unknown emails
        hash_password(password)
        return None
    if not verify_password(password, user.password_hash):
        logger.info("login_failed", user_id=user.id)
        return None

    upgraded = rehash_if_needed(password, user.password_hash)
    if upgraded is not None:
        user.password_hash = upgraded
        await db.commit()
        logger.info("password_rehashed", user_id=user.id)
    return user
