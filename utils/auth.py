"""Helpers shared by blueprints for resolving the caller and its rights."""

from __future__ import annotations

from flask import current_app
from flask_jwt_extended import get_jwt_identity
from werkzeug.exceptions import Forbidden, NotFound, Unauthorized

from models import db
from models.user import User
from security.passwords import PasswordHasher


def get_password_hasher() -> PasswordHasher:
    """Return the hasher built by the application factory."""

    return current_app.extensions["password_hasher"]


def get_current_user() -> User | None:
    try:
        identity = get_jwt_identity()
    except RuntimeError:
        return None
    if identity is None:
        return None
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def require_user() -> User:
    user = get_current_user()
    if user is None:
        raise Unauthorized("Authentication required.")
    return user


def require_admin() -> User:
    user = require_user()
    if not user.is_admin():
        raise Forbidden("Admin privileges required.")
    return user


def require_owner_or_admin(owner_id: int) -> User:
    """Return the caller if it owns the resource or is an admin."""

    user = require_user()
    if user.id != owner_id and not user.is_admin():
        raise Forbidden("You are not allowed to modify this resource.")
    return user


def get_or_404(model, object_id: int, label: str):
    instance = db.session.get(model, object_id)
    if instance is None:
        raise NotFound(f"{label} not found.")
    return instance
