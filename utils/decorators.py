from __future__ import annotations
from functools import wraps
from flask import request, g, abort
from utils.security import InvalidToken, verify_access


def jwt_required():
    """Reject the request with 401 unless it carries a valid access token.

    Stateless: only signature and expiry are checked, the user is not loaded.
    The decoded user id lands in `g.current_user_id`.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer ") or not auth[7:].strip():
                abort(401, description="Access token required")
            token = auth.split(" ", 1)[1].strip()
            try:
                g.current_user_id = verify_access(token)
            except InvalidToken:
                abort(401, description="Invalid or expired token")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
