from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g

from models import storage
from models.comment import Comment
from models.post import Post
from models.schemas.comment import CommentContentSchema, CommentOutSchema
from models.schemas.common import prefetch_owners
from utils.decorators import jwt_required
from utils.ownership import current_user_or_401, get_or_404, get_owned_or_abort, parse_object_id

logger = logging.getLogger(__name__)

bp = Blueprint("comments", __name__, url_prefix="/comments")

comment_content_schema = CommentContentSchema()
comment_out_schema = CommentOutSchema()
comments_out_schema = CommentOutSchema(many=True)


@bp.get("/post/<post_id>")
def list_post_comments(post_id: str):
    """
    List the comments of a post, newest first
    ---
    tags:
      - Comments
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200: { description: OK }
    """
    comments = storage.all(
        Comment,
        {"post": parse_object_id(post_id, "Post")},
        sort=[("created_at", -1)],
    )
    prefetch_owners(comments)
    return jsonify(comments_out_schema.dump(comments))


@bp.get("/<comment_id>")
def get_comment(comment_id: str):
    """
    Get a comment by id
    ---
    tags:
      - Comments
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Comment not found }
    """
    return jsonify(comment_out_schema.dump(get_or_404(Comment, comment_id)))


@bp.post("/<post_id>")
@jwt_required()
def create_comment(post_id: str):
    """
    Comment on a post
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string }
    responses:
      201: { description: Created }
      400: { description: Content is required }
      401: { description: Unauthorized }
      404: { description: Post not found }
    """
    payload = request.get_json(silent=True) or {}
    data = comment_content_schema.load(payload)
    post = get_or_404(Post, post_id)
    owner = current_user_or_401()

    comment = Comment(post=post.id, content=data["content"], owner=owner.id)
    storage.new(comment)
    logger.info("User %s commented on post %s", g.current_user_id, post.id)
    return jsonify(comment_out_schema.dump(comment)), 201


@bp.put("/<comment_id>")
@jwt_required()
def update_comment(comment_id: str):
    """
    Replace the content of one of your comments
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            content: { type: string }
    responses:
      200: { description: OK }
      400: { description: Content is required }
      401: { description: Unauthorized }
      403: { description: Not the owner }
      404: { description: Comment not found }
    """
    comment = get_owned_or_abort(Comment, comment_id, action="update")
    payload = request.get_json(silent=True) or {}
    data = comment_content_schema.load(payload)

    comment.content = data["content"]
    comment.save()
    return jsonify(comment_out_schema.dump(comment))


@bp.delete("/<comment_id>")
@jwt_required()
def delete_comment(comment_id: str):
    """
    Delete one of your comments
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
    responses:
      200: { description: Comment deleted successfully }
      401: { description: Unauthorized }
      403: { description: Not the owner }
      404: { description: Comment not found }
    """
    comment = get_owned_or_abort(Comment, comment_id, action="delete")
    comment.delete()
    return jsonify({"message": "Comment deleted successfully"})
