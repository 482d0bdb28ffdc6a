"""Posts blueprint with CRUD and per-post comment listing."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from models import db
from models.comment import Comment
from models.post import Post
from utils.auth import get_or_404, require_owner_or_admin, require_user
from utils.request_validation import get_string, parse_json_request, query_arg

posts_bp = Blueprint("posts", __name__)


@posts_bp.route("", methods=["GET"])
def list_posts():
    """Return posts, optionally filtered by author.
    ---
    tags: [posts]
    parameters:
      - {in: query, name: authorId, type: integer, required: false}
    responses:
      200:
        description: List of posts, newest first.
    """

    author_id = query_arg(request, "authorId", type=int)
    if author_id is not None:
        posts = Post.for_author(author_id).all()
    else:
        posts = Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
    return jsonify({"status": "success", "data": [post.to_dict() for post in posts]})


@posts_bp.route("/<int:post_id>", methods=["GET"])
def get_post(post_id: int):
    """Return one post.
    ---
    tags: [posts]
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
    responses:
      200:
        description: The post.
      404:
        description: Post not found.
    """
    post = get_or_404(Post, post_id, "Post")
    return jsonify({"status": "success", "data": post.to_dict()})


@posts_bp.route("/<int:post_id>/comments", methods=["GET"])
def list_post_comments(post_id: int):
    """Return the comments attached to a post.
    ---
    tags: [posts, comments]
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
    responses:
      200:
        description: Comments, oldest first.
      404:
        description: Post not found.
    """

    get_or_404(Post, post_id, "Post")
    comments = Comment.for_post(post_id).all()
    return jsonify(
        {"status": "success", "data": [comment.to_dict() for comment in comments]}
    )


@posts_bp.route("", methods=["POST"])
@jwt_required()
def create_post():
    """Create a post authored by the caller.
    ---
    tags: [posts]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, body]
          properties:
            title: {type: string, maxLength: 255}
            body: {type: string}
    responses:
      201:
        description: Post created.
    """

    user = require_user()
    payload = parse_json_request(request, required_keys=("title", "body"))

    post = Post(
        title=get_string(payload, "title"),
        body=get_string(payload, "body", max_length=None),
        author_id=user.id,
    )
    db.session.add(post)
    db.session.commit()
    current_app.logger.info("User %s created post %s", user.id, post.id)

    return jsonify({"status": "success", "data": post.to_dict()}), HTTPStatus.CREATED


@posts_bp.route("/<int:post_id>", methods=["PATCH"])
@jwt_required()
def update_post(post_id: int):
    """Edit a post.
    ---
    tags: [posts]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: {type: string, maxLength: 255}
            body: {type: string}
    responses:
      200:
        description: Updated post.
      403:
        description: Not the author or an admin.
    """
    post = get_or_404(Post, post_id, "Post")
    require_owner_or_admin(post.author_id)
    payload = parse_json_request(request)

    if "title" in payload:
        post.title = get_string(payload, "title")
    if "body" in payload:
        post.body = get_string(payload, "body", max_length=None)

    db.session.commit()
    return jsonify({"status": "success", "data": post.to_dict()})


@posts_bp.route("/<int:post_id>", methods=["DELETE"])
@jwt_required()
def delete_post(post_id: int):
    """Delete a post and its comments.
    ---
    tags: [posts]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
    responses:
      204:
        description: Deleted.
      403:
        description: Not the author or an admin.
    """

    post = get_or_404(Post, post_id, "Post")
    require_owner_or_admin(post.author_id)

    Comment.query.filter_by(post_id=post.id).delete(synchronize_session=False)
    db.session.delete(post)
    db.session.commit()
    current_app.logger.info("Deleted post %s", post_id)
    return "", HTTPStatus.NO_CONTENT
