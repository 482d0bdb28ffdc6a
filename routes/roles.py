"""Roles blueprint. Reading is public; changes require an administrator."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import Conflict

from models import db
from models.role import Role
from models.user import User
from utils.auth import get_or_404, require_admin
from utils.request_validation import get_string, parse_json_request

roles_bp = Blueprint("roles", __name__)


def _role_name(payload: dict) -> str:
    return get_string(payload, "name", max_length=64).lower()


def _ensure_name_free(name: str, exclude_id: int | None = None) -> None:
    existing = Role.find_by_name(name)
    if existing is not None and existing.id != exclude_id:
        raise Conflict(f"Role '{name}' already exists.")


@roles_bp.route("", methods=["GET"])
def list_roles():
    """
    ---
    tags: [roles]
    responses:
      200:
        description: List of roles.
    """
    roles = Role.query.order_by(Role.id.asc()).all()
    return jsonify({"status": "success", "data": [role.to_dict() for role in roles]})


@roles_bp.route("/<int:role_id>", methods=["GET"])
def get_role(role_id: int):
    """
    ---
    tags: [roles]
    parameters:
      - {in: path, name: role_id, type: integer, required: true}
    responses:
      200:
        description: The role.
      404:
        description: Role not found.
    """
    role = get_or_404(Role, role_id, "Role")
    return jsonify({"status": "success", "data": role.to_dict()})


@roles_bp.route("", methods=["POST"])
@jwt_required()
def create_role():
    """
    ---
    tags: [roles]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: {type: string, maxLength: 64}
    responses:
      201:
        description: Role created.
      403:
        description: Admin privileges required.
      409:
        description: Role name already exists.
    """
    require_admin()
    payload = parse_json_request(request, required_keys=("name",))
    name = _role_name(payload)
    _ensure_name_free(name)

    role = Role(name=name)
    db.session.add(role)
    db.session.commit()
    current_app.logger.info("Created role %s", name)
    return jsonify({"status": "success", "data": role.to_dict()}), HTTPStatus.CREATED


@roles_bp.route("/<int:role_id>", methods=["PATCH"])
@jwt_required()
def update_role(role_id: int):
    """
    ---
    tags: [roles]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: role_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: {type: string, maxLength: 64}
    responses:
      200:
        description: Renamed role.
      409:
        description: Role name already exists.
    """
    require_admin()
    role = get_or_404(Role, role_id, "Role")
    payload = parse_json_request(request, required_keys=("name",))
    name = _role_name(payload)
    _ensure_name_free(name, exclude_id=role.id)

    role.name = name
    db.session.commit()
    return jsonify({"status": "success", "data": role.to_dict()})


@roles_bp.route("/<int:role_id>", methods=["DELETE"])
@jwt_required()
def delete_role(role_id: int):
    """Delete a role that no user references.
    ---
    tags: [roles]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: role_id, type: integer, required: true}
    responses:
      204:
        description: Deleted.
      409:
        description: Role is still assigned to users.
    """

    require_admin()
    role = get_or_404(Role, role_id, "Role")
    if User.query.filter_by(role_id=role.id).first() is not None:
        raise Conflict("Role is still assigned to users.")

    db.session.delete(role)
    db.session.commit()
    current_app.logger.info("Deleted role %s", role.name)
    return "", HTTPStatus.NO_CONTENT
