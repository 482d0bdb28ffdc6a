"""Peppered, salted PBKDF2 password hashing.

Each user gets a random salt; every hash additionally mixes in an
application-wide pepper. The derived key and the salt are stored as a
pair of hex strings, and a hash can only be verified with the exact salt
it was derived from.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from typing import Any, Mapping

SALT_BYTES = 128


class PasswordConfigError(RuntimeError):
    """Raised when the password hashing configuration is missing or invalid."""


class PasswordInputError(TypeError):
    """Raised when a password or salt is not a string."""


def _positive_int(name: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise PasswordConfigError(f"{name} must be an integer, got {value!r}.") from None
    if number <= 0:
        raise PasswordConfigError(f"{name} must be positive, got {number}.")
    return number


@dataclass(frozen=True)
class PasswordSettings:
    """KDF parameters, built once at startup and shared read-only."""

    pepper: str
    iterations: int
    keylen: int
    digest: str

    def __post_init__(self) -> None:
        if not isinstance(self.pepper, str) or not self.pepper:
            raise PasswordConfigError("PASSWORD_PEPPER must be set.")
        if not isinstance(self.digest, str) or not self.digest:
            raise PasswordConfigError("PASSWORD_DIGEST must be set.")
        try:
            hashlib.pbkdf2_hmac(self.digest, b"", b"", 1)
        except (ValueError, TypeError):
            raise PasswordConfigError(
                f"Unsupported password digest: {self.digest!r}."
            ) from None
        object.__setattr__(
            self, "iterations", _positive_int("PASSWORD_ITERATIONS", self.iterations)
        )
        object.__setattr__(self, "keylen", _positive_int("PASSWORD_KEYLEN", self.keylen))

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "PasswordSettings":
        """Build settings from a Flask config (or any mapping)."""

        missing = [
            key
            for key in (
                "PASSWORD_PEPPER",
                "PASSWORD_ITERATIONS",
                "PASSWORD_KEYLEN",
                "PASSWORD_DIGEST",
            )
            if config.get(key) in (None, "")
        ]
        if missing:
            raise PasswordConfigError(
                "Missing password configuration: {}.".format(", ".join(missing))
            )
        return cls(
            pepper=config["PASSWORD_PEPPER"],
            iterations=config["PASSWORD_ITERATIONS"],
            keylen=config["PASSWORD_KEYLEN"],
            digest=config["PASSWORD_DIGEST"],
        )


class PasswordHasher:
    """Derive and verify password hashes for a fixed set of settings."""

    def __init__(self, settings: PasswordSettings):
        self.settings = settings
        self._dummy: tuple[str, str] | None = None

    @staticmethod
    def generate_salt() -> str:
        return secrets.token_hex(SALT_BYTES)

    def hash(self, password: str, salt: str | None = None) -> tuple[str, str]:
        """Return ``(hash, salt)`` for ``password``.

        A fresh salt is generated when none is given. Both values are hex
        strings and must be stored together.
        """

        if not isinstance(password, str):
            raise PasswordInputError(
                f"password must be a string, not {type(password).__name__}."
            )
        if salt is None:
            salt = self.generate_salt()
        elif not isinstance(salt, str):
            raise PasswordInputError(f"salt must be a string, not {type(salt).__name__}.")

        settings = self.settings
        derived = hashlib.pbkdf2_hmac(
            settings.digest,
            password.encode("utf-8"),
            (salt + settings.pepper).encode("utf-8"),
            settings.iterations,
            settings.keylen,
        )
        return derived.hex(), salt

    def verify(self, password: str, stored_hash: str, stored_salt: str) -> bool:
        """Return True if ``password`` derives ``stored_hash`` under ``stored_salt``."""

        if not isinstance(stored_hash, str):
            raise PasswordInputError(
                f"stored hash must be a string, not {type(stored_hash).__name__}."
            )
        if not isinstance(stored_salt, str):
            raise PasswordInputError(
                f"stored salt must be a string, not {type(stored_salt).__name__}."
            )
        candidate, _ = self.hash(password, stored_salt)
        return hmac.compare_digest(candidate.encode("ascii"), stored_hash.encode("utf-8"))

    def verify_dummy(self, password: str) -> bool:
        """Run a full verification against a throwaway pair; always False.

        Used when no stored credentials exist so the caller still pays the
        KDF cost.
        """

        if self._dummy is None:
            self._dummy = self.hash(secrets.token_hex(16))
        self.verify(password, *self._dummy)
        return False
