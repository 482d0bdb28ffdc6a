"""Comments blueprint."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from models import db
from models.comment import Comment
from models.post import Post
from utils.auth import get_or_404, require_owner_or_admin, require_user
from utils.request_validation import get_int, get_string, parse_json_request, query_arg

comments_bp = Blueprint("comments", __name__)


@comments_bp.route("", methods=["GET"])
def list_comments():
    """Return comments, optionally restricted to one post.
    ---
    tags: [comments]
    parameters:
      - {in: query, name: postId, type: integer, required: false}
    responses:
      200:
        description: List of comments.
    """

    post_id = query_arg(request, "postId", type=int)
    if post_id is not None:
        comments = Comment.for_post(post_id).all()
    else:
        comments = Comment.query.order_by(Comment.id.asc()).all()
    return jsonify(
        {"status": "success", "data": [comment.to_dict() for comment in comments]}
    )


@comments_bp.route("/<int:comment_id>", methods=["GET"])
def get_comment(comment_id: int):
    """
    ---
    tags: [comments]
    parameters:
      - {in: path, name: comment_id, type: integer, required: true}
    responses:
      200:
        description: The comment.
      404:
        description: Comment not found.
    """
    comment = get_or_404(Comment, comment_id, "Comment")
    return jsonify({"status": "success", "data": comment.to_dict()})


@comments_bp.route("", methods=["POST"])
@jwt_required()
def create_comment():
    """
    ---
    tags: [comments]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [postId, body]
          properties:
            postId: {type: integer}
            body: {type: string}
    responses:
      201:
        description: Comment created.
      404:
        description: Post not found.
    """
    user = require_user()
    payload = parse_json_request(request, required_keys=("postId", "body"))
    post = get_or_404(Post, get_int(payload, "postId"), "Post")

    comment = Comment(
        body=get_string(payload, "body", max_length=None),
        post_id=post.id,
        author_id=user.id,
    )
    db.session.add(comment)
    db.session.commit()

    return (
        jsonify({"status": "success", "data": comment.to_dict()}),
        HTTPStatus.CREATED,
    )


@comments_bp.route("/<int:comment_id>", methods=["PATCH"])
@jwt_required()
def update_comment(comment_id: int):
    """
    ---
    tags: [comments]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: comment_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [body]
          properties:
            body: {type: string}
    responses:
      200:
        description: Updated comment.
      403:
        description: Not the author or an admin.
    """
    comment = get_or_404(Comment, comment_id, "Comment")
    require_owner_or_admin(comment.author_id)
    payload = parse_json_request(request, required_keys=("body",))

    comment.body = get_string(payload, "body", max_length=None)
    db.session.commit()
    return jsonify({"status": "success", "data": comment.to_dict()})


@comments_bp.route("/<int:comment_id>", methods=["DELETE"])
@jwt_required()
def delete_comment(comment_id: int):
    """
    ---
    tags: [comments]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: comment_id, type: integer, required: true}
    responses:
      204:
        description: Deleted.
      403:
        description: Not the author or an admin.
    """
    comment = get_or_404(Comment, comment_id, "Comment")
    require_owner_or_admin(comment.author_id)

    db.session.delete(comment)
    db.session.commit()
    return "", HTTPStatus.NO_CONTENT
