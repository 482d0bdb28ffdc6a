"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.role import Role  # noqa: E402
from models.user import User  # noqa: E402


class BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    PASSWORD_PEPPER = "test-pepper"
    PASSWORD_ITERATIONS = 1000
    PASSWORD_KEYLEN = 32
    PASSWORD_DIGEST = "sha256"
    RATE_LIMIT = "1000 per minute"
    CORS_ORIGINS = "*"


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance with seeded roles."""

    application = create_app(BaseTestConfig)

    with application.app_context():
        db.create_all()
        Role.ensure_defaults()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def make_user(app: Flask):
    """Return a factory that persists a user and returns its id."""

    def _make_user(
        email: str = "writer@example.com",
        password: str = "WriterPass123",
        role: str = "user",
    ) -> int:
        with app.app_context():
            user = User(
                first_name="Test",
                last_name="Writer",
                display_name=email.split("@")[0],
                email=email,
                role_id=Role.find_by_name(role).id,
            )
            user.set_password(password, app.extensions["password_hasher"])
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture()
def auth_headers(app: Flask):
    """Return a factory building bearer headers for a user id."""

    def _auth_headers(user_id: int) -> dict[str, str]:
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
