"""
Password hashing (argon2id) and signup strength rules.

Only hashes are stored. Hashes made with older parameters are upgraded
transparently on the next successful login.
"""

from __future__ import annotations

from collections.abc import Callable

import argon2

from wordgame.config import get_settings

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,
)

# isalpha() accepts Tamil letters as well as Latin ones
_CHARACTER_RULES: list[tuple[Callable[[str], bool], str]] = [
    (lambda c: c.isalpha(), "Password must contain at least one letter"),
    (lambda c: c.isdigit(), "Password must contain at least one digit"),
]


class PasswordStrengthError(ValueError):
    """Raised when a password does not meet strength requirements."""


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """True on a match. A mismatch or a malformed stored hash gives False."""
    try:
        return _hasher.verify(password_hash, password)
    except (argon2.exceptions.VerifyMismatchError, argon2.exceptions.InvalidHashError):
        return False


def rehash_if_needed(password: str, password_hash: str) -> str | None:
    """New hash when ``password_hash`` uses outdated parameters, else None.

    Only call after ``verify_password`` succeeded.
    """
    if _hasher.check_needs_rehash(password_hash):
        return _hasher.hash(password)
    return None


def validate_password_strength(password: str) -> None:
    """
    Check a signup password against the configured length bounds and character rules.

    Raises PasswordStrengthError naming the first rule broken.
    """
    settings = get_settings()
    if not password or not password.strip():
        msg = "Password cannot be empty"
        raise PasswordStrengthError(msg)
    if not settings.password_min_length <= len(password) <= settings.password_max_length:
        msg = (
            f"Password must be between {settings.password_min_length} "
            f"and {settings.password_max_length} characters"
        )
        raise PasswordStrengthError(msg)
    for rule, msg in _CHARACTER_RULES:
        if not any(rule(c) for c in password):
            raise PasswordStrengthError(msg)
