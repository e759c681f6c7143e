from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g

from models import storage
from models.post import Post
from models.schemas.post import PostCreateSchema, PostUpdateSchema, PostOutSchema
from models.schemas.common import prefetch_owners
from utils.decorators import jwt_required
from utils.ownership import current_user_or_401, get_or_404, get_owned_or_abort

logger = logging.getLogger(__name__)

bp = Blueprint("posts", __name__, url_prefix="/posts")

post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_out_schema = PostOutSchema()
posts_out_schema = PostOutSchema(many=True)


@bp.get("")
def list_posts():
    """
    List all posts, newest first
    ---
    tags:
      - Posts
    responses:
      200:
        description: OK (each post embeds its owner)
    """
    posts = storage.all(Post, sort=[("created_at", -1)])
    prefetch_owners(posts)
    return jsonify(posts_out_schema.dump(posts))


@bp.get("/<post_id>")
def get_post(post_id: str):
    """
    Get a post by id
    ---
    tags:
      - Posts
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Post not found }
    """
    return jsonify(post_out_schema.dump(get_or_404(Post, post_id)))


@bp.post("")
@jwt_required()
def create_post():
    """
    Create a post owned by the caller
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, content]
          properties:
            title: { type: string }
            content: { type: string }
    responses:
      201: { description: Created }
      400: { description: Title and content are required }
      401: { description: Unauthorized }
    """
    payload = request.get_json(silent=True) or {}
    data = post_create_schema.load(payload)

    owner = current_user_or_401()
    post = Post(title=data["title"], content=data["content"], owner=owner.id)
    storage.new(post)
    logger.info("User %s created post %s", g.current_user_id, post.id)
    return jsonify(post_out_schema.dump(post)), 201


@bp.put("/<post_id>")
@jwt_required()
def update_post(post_id: str):
    """
    Update title and/or content of one of your posts
    ---
    tags:
      - Posts
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
        schema:
          type: object
          properties:
            title: { type: string }
            content: { type: string }
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      403: { description: Not the owner }
      404: { description: Post not found }
    """
    post = get_owned_or_abort(Post, post_id, action="update")
    payload = request.get_json(silent=True) or {}
    data = post_update_schema.load(payload)

    if data.get("title"):
        post.title = data["title"]
    if data.get("content"):
        post.content = data["content"]
    post.save()
    return jsonify(post_out_schema.dump(post))


@bp.delete("/<post_id>")
@jwt_required()
def delete_post(post_id: str):
    """
    Delete one of your posts
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200: { description: Post deleted successfully }
      401: { description: Unauthorized }
      403: { description: Not the owner }
      404: { description: Post not found }
    """
    post = get_owned_or_abort(Post, post_id, action="delete")
    post.delete()
    logger.info("User %s deleted post %s", g.current_user_id, post.id)
    return jsonify({"message": "Post deleted successfully"})
