"""User model definition."""

from __future__ import annotations

from datetime import datetime

from security.passwords import PasswordHasher

from . import db
from .role import Role


class User(db.Model):
    """Represents a blog author or reader."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # Input is capped at 255 characters; escaping "<" can grow it up to 4x
    first_name = db.Column(db.String(1024), nullable=False)
    last_name = db.Column(db.String(1024), nullable=False)
    display_name = db.Column(db.String(1024), nullable=False)
    email = db.Column(db.String(1024), unique=True, nullable=False)
    password_hash = db.Column(db.String(512), nullable=False)
    password_salt = db.Column(db.String(512), nullable=False)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def set_password(self, password: str, hasher: PasswordHasher) -> None:
        """Derive a new hash with a fresh salt and store the pair."""

        self.password_hash, self.password_salt = hasher.hash(password)

    def check_password(self, password: str, hasher: PasswordHasher) -> bool:
        """Verify a password against the stored hash and salt."""

        if not self.password_hash or not self.password_salt:
            return False
        return hasher.verify(password, self.password_hash, self.password_salt)

    def get_role(self) -> Role | None:
        """Load the referenced role with an explicit query."""

        return db.session.get(Role, self.role_id)

    def is_admin(self) -> bool:
        role = self.get_role()
        return role is not None and role.name == "admin"

    @classmethod
    def find_by_email(cls, email: str) -> User | None:
        return cls.query.filter(db.func.lower(cls.email) == email.lower()).first()

    @classmethod
    def find_with_role(cls, user_id: int) -> tuple[User, Role] | None:
        """Return ``(user, role)`` joined on ``users.role_id``."""

        row = (
            db.session.query(cls, Role)
            .join(Role, cls.role_id == Role.id)
            .filter(cls.id == user_id)
            .first()
        )
        if row is None:
            return None
        return row[0], row[1]

    def to_dict(self, role: Role | None = None) -> dict:
        """Serialize the user without password material."""

        data = {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "displayName": self.display_name,
            "email": self.email,
            "roleId": self.role_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if role is not None:
            data["role"] = role.to_dict()
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
