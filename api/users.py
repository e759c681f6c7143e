from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, abort

from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema, UserUpdateSchema, UserOutSchema
from utils.ownership import get_or_404
from utils.security import hash_password

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, url_prefix="/users")

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)

# NOTE: these routes are public, same as the rest of the user CRUD has always been.


@bp.get("")
def list_users():
    """
    List all users
    ---
    tags:
      - Users
    responses:
      200: { description: OK }
    """
    users = storage.all(User, sort=[("created_at", -1)])
    return jsonify(user_list_out_schema.dump(users))


@bp.get("/<user_id>")
def get_user(user_id: str):
    """
    Get a user by id
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    return jsonify(user_out_schema.dump(get_or_404(User, user_id)))


@bp.post("")
def create_user():
    """
    Create a user (no session is opened, see /auth/register for that)
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            username: { type: string }
            email: { type: string }
            password: { type: string }
            profilePicture: { type: string }
            bio: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error or duplicate username/email }
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if User.find_conflict(data["username"], data["email"]):
        abort(400, description="User with this email or username already exists")

    user = User(
        username=data["username"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        profile_picture=data.get("profile_picture") or "",
        bio=data.get("bio") or "",
    )
    storage.new(user)
    logger.info("Created user %s", user.id)
    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/<user_id>")
def update_user(user_id: str):
    """
    Update a user; only the fields sent are changed
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string }
            email: { type: string }
            password: { type: string }
            profilePicture: { type: string }
            bio: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error or duplicate username/email }
      404: { description: User not found }
    """
    user = get_or_404(User, user_id)
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    username, email = data.get("username"), data.get("email")
    if User.find_conflict(username, email, exclude_id=user.id):
        abort(400, description="User with this email or username already exists")

    for field in ("username", "email", "profile_picture", "bio"):
        if data.get(field):
            setattr(user, field, data[field])
    if data.get("password"):
        user.password_hash = hash_password(data["password"])

    user.save()
    return jsonify(user_out_schema.dump(user))


@bp.delete("/<user_id>")
def delete_user(user_id: str):
    """
    Delete a user (their posts and comments are left in place)
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: User deleted }
      404: { description: User not found }
    """
    user = get_or_404(User, user_id)
    user.delete()
    logger.info("Deleted user %s", user.id)
    return jsonify({"message": "User deleted"})
