"""Tests for the User model helpers."""

from models import db
from models.role import Role
from models.user import User


def _new_user(email: str = "helper@example.com") -> User:
    return User(
        first_name="Ada",
        last_name="Lovelace",
        display_name="ada",
        email=email,
        role_id=Role.find_by_name("user").id,
    )


def test_set_and_check_password(app):
    """set_password stores a hash/salt pair that check_password accepts."""

    hasher = app.extensions["password_hasher"]
    with app.app_context():
        user = _new_user()
        user.set_password("password123", hasher)
        db.session.add(user)
        db.session.commit()
        db.session.refresh(user)

        assert user.password_hash != "password123"
        assert user.password_salt
        assert user.check_password("password123", hasher) is True
        assert user.check_password("password124", hasher) is False


def test_set_password_rotates_salt(app):
    hasher = app.extensions["password_hasher"]
    with app.app_context():
        user = _new_user()
        user.set_password("password123", hasher)
        first_pair = (user.password_hash, user.password_salt)

        user.set_password("password123", hasher)

        assert user.password_salt != first_pair[1]
        assert user.password_hash != first_pair[0]
        assert user.check_password("password123", hasher) is True


def test_check_password_without_credentials(app):
    hasher = app.extensions["password_hasher"]
    with app.app_context():
        assert _new_user().check_password("anything", hasher) is False


def test_find_with_role_joins_role(app, make_user):
    user_id = make_user("joined@example.com", role="admin")

    with app.app_context():
        user, role = User.find_with_role(user_id)

        assert user.email == "joined@example.com"
        assert role.name == "admin"
        assert user.is_admin() is True
        assert User.find_with_role(user_id + 100) is None


def test_find_by_email_is_case_insensitive(app, make_user):
    make_user("case@example.com")

    with app.app_context():
        assert User.find_by_email("CASE@example.com") is not None


def test_to_dict_hides_password_material(app, make_user):
    user_id = make_user()

    with app.app_context():
        user, role = User.find_with_role(user_id)
        data = user.to_dict(role=role)

    assert "passwordHash" not in data
    assert "passwordSalt" not in data
    assert "password_hash" not in data
    assert data["role"] == {"id": role.id, "name": "user"}
    assert data["displayName"] == "writer"


def test_ensure_defaults_is_idempotent(app):
    with app.app_context():
        Role.ensure_defaults()
        names = sorted(role.name for role in Role.query.all())

    assert names == ["admin", "user"]
