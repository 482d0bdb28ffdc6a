"""Password hashing and verification."""

from .passwords import (
    PasswordConfigError,
    PasswordHasher,
    PasswordInputError,
    PasswordSettings,
)

__all__ = [
    "PasswordConfigError",
    "PasswordHasher",
    "PasswordInputError",
    "PasswordSettings",
]
