"""Users blueprint: registration, login, profile and password management."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, jwt_required, verify_jwt_in_request
from werkzeug.exceptions import BadRequest, Conflict, Forbidden, NotFound, Unauthorized

from models import db
from models.comment import Comment
from models.post import Post
from models.role import Role
from models.user import User
from utils.auth import (
    get_current_user,
    get_or_404,
    get_password_hasher,
    require_owner_or_admin,
    require_user,
)
from utils.request_validation import get_int, get_string, parse_json_request

users_bp = Blueprint("users", __name__)

PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "displayName": "display_name",
}


def _normalize_email(raw_email: str) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return raw_email.strip().lower()


def _get_password(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise BadRequest(f"{key} is required.")
    return value


def _email_taken(email: str, exclude_id: int | None = None) -> bool:
    existing = User.find_by_email(email)
    return existing is not None and existing.id != exclude_id


def _resolve_role(data: dict) -> Role:
    """Pick the role for a new user; only admins may choose a non-default one."""

    role_id = get_int(data, "roleId", required=False)
    default_name = current_app.config.get("DEFAULT_ROLE", "user")

    if role_id is None:
        role = Role.find_by_name(default_name)
        if role is None:
            raise NotFound(f"Default role '{default_name}' does not exist.")
        return role

    role = db.session.get(Role, role_id)
    if role is None:
        raise NotFound("Role not found.")
    if role.name != default_name:
        verify_jwt_in_request(optional=True)
        caller = get_current_user()
        if caller is None or not caller.is_admin():
            raise Forbidden("Only administrators may assign this role.")
    return role


@users_bp.route("", methods=["POST"])
def register():
    """Register a new user.
    ---
    tags: [users]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [firstName, lastName, displayName, email, password]
          properties:
            firstName: {type: string, maxLength: 255}
            lastName: {type: string, maxLength: 255}
            displayName: {type: string, maxLength: 255}
            email: {type: string, maxLength: 255}
            password: {type: string}
            roleId: {type: integer, description: Non-default roles need an admin token.}
    responses:
      201:
        description: User created.
      400:
        description: Missing or invalid fields.
      409:
        description: Email already registered.
    """

    payload = parse_json_request(
        request,
        required_keys=("firstName", "lastName", "displayName", "email", "password"),
    )
    first_name = get_string(payload, "firstName")
    last_name = get_string(payload, "lastName")
    display_name = get_string(payload, "displayName")
    email = _normalize_email(get_string(payload, "email"))
    password = _get_password(payload, "password")

    if _email_taken(email):
        raise Conflict("A user with that email already exists.")

    role = _resolve_role(payload)

    user = User(
        first_name=first_name,
        last_name=last_name,
        display_name=display_name,
        email=email,
        role_id=role.id,
    )
    user.set_password(password, get_password_hasher())

    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Registered user %s with role %s", user.id, role.name)

    return (
        jsonify({"status": "success", "data": user.to_dict(role=role)}),
        HTTPStatus.CREATED,
    )


@users_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a user and return a JWT access token.
    ---
    tags: [users]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password]
          properties:
            email: {type: string}
            password: {type: string}
    responses:
      200:
        description: Token and user profile.
      401:
        description: Invalid email or password.
    """

    payload = parse_json_request(request, required_keys=("email", "password"))
    email = _normalize_email(get_string(payload, "email"))
    password = _get_password(payload, "password")

    hasher = get_password_hasher()
    user = User.find_by_email(email)
    if user is None:
        # Unknown emails pay the same KDF cost as a wrong password
        hasher.verify_dummy(password)
    if user is None or not user.check_password(password, hasher):
        current_app.logger.info("Failed login attempt for %s", email)
        raise Unauthorized("Invalid email or password.")

    token = create_access_token(identity=str(user.id))
    current_app.logger.info("User %s logged in", user.id)
    return jsonify(
        {
            "status": "success",
            "data": {"token": token, "user": user.to_dict(role=user.get_role())},
        }
    )


@users_bp.route("", methods=["GET"])
def list_users():
    """Return all users.
    ---
    tags: [users]
    responses:
      200:
        description: List of users.
    """

    users = User.query.order_by(User.id.asc()).all()
    return jsonify({"status": "success", "data": [user.to_dict() for user in users]})


@users_bp.route("/<int:user_id>", methods=["GET"])
def get_user(user_id: int):
    """Return one user together with its role.
    ---
    tags: [users]
    parameters:
      - {in: path, name: user_id, type: integer, required: true}
    responses:
      200:
        description: User with role.
      404:
        description: User not found.
    """

    row = User.find_with_role(user_id)
    if row is None:
        raise NotFound("User not found.")
    user, role = row
    return jsonify({"status": "success", "data": user.to_dict(role=role)})


@users_bp.route("/<int:user_id>", methods=["PATCH"])
@jwt_required()
def update_user(user_id: int):
    """Edit profile fields of a user.
    ---
    tags: [users]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: user_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            firstName: {type: string, maxLength: 255}
            lastName: {type: string, maxLength: 255}
            displayName: {type: string, maxLength: 255}
            email: {type: string, maxLength: 255}
            roleId: {type: integer, description: Admin only.}
    responses:
      200:
        description: Updated user.
      403:
        description: Not the user or an admin.
    """

    user = get_or_404(User, user_id, "User")
    caller = require_owner_or_admin(user.id)
    payload = parse_json_request(request)

    for key, attribute in PROFILE_FIELDS.items():
        if key in payload:
            setattr(user, attribute, get_string(payload, key))

    if "email" in payload:
        email = _normalize_email(get_string(payload, "email"))
        if _email_taken(email, exclude_id=user.id):
            raise Conflict("A user with that email already exists.")
        user.email = email

    if "roleId" in payload:
        if not caller.is_admin():
            raise Forbidden("Only administrators may change roles.")
        role_id = get_int(payload, "roleId")
        if db.session.get(Role, role_id) is None:
            raise NotFound("Role not found.")
        user.role_id = role_id

    db.session.commit()
    return jsonify({"status": "success", "data": user.to_dict(role=user.get_role())})


@users_bp.route("/<int:user_id>/password", methods=["PATCH"])
@jwt_required()
def change_password(user_id: int):
    """Replace a user's password after checking the current one.
    ---
    tags: [users]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: user_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [currentPassword, newPassword]
          properties:
            currentPassword: {type: string}
            newPassword: {type: string}
    responses:
      200:
        description: Password updated with a fresh salt.
      401:
        description: Current password is incorrect.
    """

    user = get_or_404(User, user_id, "User")
    caller = require_user()
    if caller.id != user.id:
        raise Forbidden("You may only change your own password.")

    payload = parse_json_request(
        request, required_keys=("currentPassword", "newPassword")
    )
    current_password = _get_password(payload, "currentPassword")
    new_password = _get_password(payload, "newPassword")

    hasher = get_password_hasher()
    if not user.check_password(current_password, hasher):
        raise Unauthorized("Current password is incorrect.")

    user.set_password(new_password, hasher)
    db.session.commit()
    current_app.logger.info("User %s changed password", user.id)
    return jsonify({"status": "success", "message": "Password updated."})


@users_bp.route("/<int:user_id>", methods=["DELETE"])
@jwt_required()
def delete_user(user_id: int):
    """Delete a user with their posts and comments.
    ---
    tags: [users]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: user_id, type: integer, required: true}
    responses:
      204:
        description: Deleted.
      403:
        description: Not the user or an admin.
    """

    user = get_or_404(User, user_id, "User")
    require_owner_or_admin(user.id)

    post_ids = [post.id for post in Post.for_author(user.id)]
    if post_ids:
        Comment.query.filter(Comment.post_id.in_(post_ids)).delete(
            synchronize_session=False
        )
    Comment.query.filter_by(author_id=user.id).delete(synchronize_session=False)
    Post.query.filter_by(author_id=user.id).delete(synchronize_session=False)
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("Deleted user %s", user_id)
    return "", HTTPStatus.NO_CONTENT
