from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId
from flask import abort, g

from models import storage
from models.user import User


def parse_object_id(value: str, what: str = "Resource") -> ObjectId:
    """Path parameter -> ObjectId; a malformed id cannot match anything, so 404."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        abort(404, description=f"{what} not found")


def get_or_404(cls, raw_id: str):
    obj = storage.get(cls, parse_object_id(raw_id, cls.__name__))
    if obj is None:
        abort(404, description=f"{cls.__name__} not found")
    return obj


def get_owned_or_abort(cls, raw_id: str, action: str = "modify"):
    """Load a post/comment the current user may mutate.

    404 if it does not exist, 403 if `g.current_user_id` is not its owner.
    """
    obj = get_or_404(cls, raw_id)
    if not isinstance(obj.owner, ObjectId) or obj.owner != g.current_user_id:
        abort(403, description=f"Not authorized to {action} this {cls.__name__.lower()}")
    return obj


def current_user_or_401():
    """The user behind `g.current_user_id`; their token may outlive the account."""
    user = storage.get(User, g.current_user_id)
    if user is None:
        abort(401, description="User not found")
    return user
