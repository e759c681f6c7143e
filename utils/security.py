"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT (access and refresh tokens, separate secrets)
- JTI generation so every issued token is unique
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"


class InvalidToken(Exception):
    """Signature, expiry, type or subject of a JWT did not check out."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _secret(token_type: str) -> str:
    if token_type == REFRESH:
        return current_app.config["JWT_REFRESH_SECRET"]
    return current_app.config["JWT_SECRET"]


def _create_token(subject, token_type: str) -> str:
    now = _now()
    lifetime = current_app.config["REFRESH_TOKEN_EXPIRES" if token_type == REFRESH else "ACCESS_TOKEN_EXPIRES"]
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "blog-api"),
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }
    return jwt.encode(payload, _secret(token_type), algorithm=current_app.config["JWT_ALGORITHM"])


def create_access_token(subject) -> str:
    return _create_token(subject, ACCESS)


def create_refresh_token(subject) -> str:
    return _create_token(subject, REFRESH)


def issue_token_pair(user_id) -> Tuple[str, str]:
    """Return (access_token, refresh_token) for `user_id`.

    Storing the refresh token on the user is the caller's job.
    """
    return create_access_token(user_id), create_refresh_token(user_id)


def decode_token(token: str, expected_type: str = ACCESS) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises InvalidToken on invalid signature/expired jwt
    expected type must be "access" or "refresh".
    """
    try:
        decoded = jwt.decode(
            token,
            _secret(expected_type),
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "sub", "type"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token expired")
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise InvalidToken("Wrong token type")
    return decoded


def _subject(decoded: Dict[str, Any]) -> ObjectId:
    try:
        return ObjectId(decoded["sub"])
    except (InvalidId, TypeError):
        raise InvalidToken("Invalid token subject")


def verify_access(token: str) -> ObjectId:
    return _subject(decode_token(token, ACCESS))


def verify_refresh(token: str) -> ObjectId:
    """User id of a well-formed refresh token; presence in storage is checked by the caller."""
    return _subject(decode_token(token, REFRESH))
