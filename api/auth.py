"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/logout
- POST /auth/refresh

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, HS256 by default)
- Keeps every valid refresh token in the owner's `refresh_tokens` list so it can be
  revoked at logout and rotated on refresh (a refresh token works exactly once)
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, abort, current_app

from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema
from models.schemas.auth import LoginSchema, AuthOutSchema, TokenPairOutSchema

from utils.security import (
    InvalidToken,
    hash_password,
    verify_password,
    issue_token_pair,
    verify_refresh,
)

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
login_schema = LoginSchema()
auth_out_schema = AuthOutSchema()
token_pair_out_schema = TokenPairOutSchema()


def _refresh_token_from_body() -> str | None:
    payload = request.get_json(silent=True) or {}
    token = payload.get("refreshToken")
    return token if isinstance(token, str) and token else None


@bp.post("/register")
def register():
    """
    Register a new user and open a first session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [username, email, password]
          properties:
            username: { type: string, minLength: 3 }
            email: { type: string }
            password: { type: string, minLength: 6 }
            profilePicture: { type: string }
            bio: { type: string, maxLength: 500 }
    responses:
      201:
        description: Created (returns the user and a token pair)
      400:
        description: Validation error or user already exists
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if User.find_conflict(data["username"], data["email"]):
        abort(400, description="User already exists")

    user = User(
        username=data["username"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        profile_picture=data.get("profile_picture") or "",
        bio=data.get("bio") or "",
    )
    access_token, refresh_token = issue_token_pair(user.id)
    user.refresh_tokens = [refresh_token]
    storage.new(user)
    logger.info("Registered user %s", user.id)

    return jsonify(
        auth_out_schema.dump({"user": user, "access_token": access_token, "refresh_token": refresh_token})
    ), 201


@bp.post("/login")
def login():
    """
    Login: return accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: true
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns the user and a token pair)
      400:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)

    user = User.by_email(data["email"])
    if not user or not verify_password(data["password"], user.password_hash):
        logger.info("Failed login attempt")
        abort(400, description="Invalid credentials")

    access_token, refresh_token = issue_token_pair(user.id)
    # Each login is a new session; older sessions keep their own refresh tokens
    user.add_refresh_token(refresh_token, limit=current_app.config["MAX_REFRESH_TOKENS"])
    logger.info("User %s logged in (%d open sessions)", user.id, len(user.refresh_tokens))

    return jsonify(
        auth_out_schema.dump({"user": user, "access_token": access_token, "refresh_token": refresh_token})
    ), 200


@bp.post("/logout")
def logout():
    """
    Logout: revoke a refresh token. Unknown tokens are accepted silently.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: true
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: Logged out
      400:
        description: refreshToken missing
    """
    refresh_token = _refresh_token_from_body()
    if not refresh_token:
        abort(400, description="RefreshToken required")

    if User.revoke_refresh_token(refresh_token):
        logger.info("Refresh token revoked at logout")
    return jsonify({"message": "Logged out successfully"}), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain new access and refresh tokens (rotation).
    The refresh token sent in is invalidated.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: true
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New token pair
      401:
        description: refreshToken missing
      403:
        description: Invalid, expired, revoked or already used refresh token
    """
    refresh_token = _refresh_token_from_body()
    if not refresh_token:
        abort(401, description="RefreshToken required")

    try:
        user_id = verify_refresh(refresh_token)
    except InvalidToken as exc:
        logger.info("Refresh rejected: %s", exc)
        abort(403, description="Invalid refresh token")

    if not User.consume_refresh_token(user_id, refresh_token):
        logger.warning("Refresh token for user %s is unknown or was already used", user_id)
        abort(403, description="Invalid refresh token")

    access_token, new_refresh_token = issue_token_pair(user_id)
    user = storage.get(User, user_id)
    if user is None:
        abort(403, description="Invalid refresh token")
    user.add_refresh_token(new_refresh_token, limit=current_app.config["MAX_REFRESH_TOKENS"])
    logger.info("Rotated refresh token for user %s", user_id)

    return jsonify(
        token_pair_out_schema.dump({"access_token": access_token, "refresh_token": new_refresh_token})
    ), 200
