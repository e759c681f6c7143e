from __future__ import annotations

from bson import ObjectId

import models
from models.base_model import BaseModel, utcnow


class User(BaseModel):
    """
    A registered user.

    `refresh_tokens` holds every refresh token that is still valid for this user, one per
    open session. The list is only ever changed through the atomic helpers below so two
    requests racing on the same token cannot both consume it.
    """

    __collection__ = "users"
    __fields__ = ("username", "email", "password_hash", "profile_picture", "bio", "refresh_tokens")
    __secret_fields__ = ("password_hash", "refresh_tokens")

    username = None
    email = None
    password_hash = None
    profile_picture = ""
    bio = ""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.refresh_tokens = list(kwargs.get("refresh_tokens") or [])

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def save(self):
        """Write profile fields only; the refresh-token list is never overwritten wholesale."""
        self.updated_at = utcnow()
        doc = self.to_document()
        del doc["_id"], doc["refresh_tokens"]
        models.storage.collection(User).update_one({"_id": self.id}, {"$set": doc})

    @classmethod
    def find_conflict(cls, username: str | None, email: str | None, exclude_id: ObjectId | None = None):
        """Return a user already holding `username` or `email`, if any."""
        clauses = []
        if username:
            clauses.append({"username": username})
        if email:
            clauses.append({"email": email})
        if not clauses:
            return None
        query = {"$or": clauses}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return models.storage.find_one(cls, query)

    @classmethod
    def by_email(cls, email: str):
        return models.storage.find_one(cls, {"email": email})

    def add_refresh_token(self, token: str, limit: int | None = None):
        """Start a session: store `token`, evicting the oldest ones beyond `limit`."""
        users = models.storage.collection(User)
        users.update_one(
            {"_id": self.id},
            {"$push": {"refresh_tokens": token}, "$set": {"updated_at": utcnow()}},
        )
        doc = users.find_one({"_id": self.id}, {"refresh_tokens": 1}) or {}
        tokens = doc.get("refresh_tokens", [])
        if limit and len(tokens) > limit:
            for stale in tokens[:-limit]:
                users.update_one({"_id": self.id}, {"$pull": {"refresh_tokens": stale}})
            tokens = tokens[-limit:]
        self.refresh_tokens = tokens

    @classmethod
    def consume_refresh_token(cls, user_id: ObjectId, token: str) -> bool:
        """Remove `token` from the user's list only if it is still there.

        Returns False when the token was already rotated away or revoked, which is what
        makes a refresh token single-use.
        """
        result = models.storage.collection(cls).update_one(
            {"_id": user_id, "refresh_tokens": token},
            {"$pull": {"refresh_tokens": token}, "$set": {"updated_at": utcnow()}},
        )
        return result.modified_count == 1

    @classmethod
    def revoke_refresh_token(cls, token: str) -> bool:
        """Logout: drop `token` from whichever user holds it."""
        result = models.storage.collection(cls).update_one(
            {"refresh_tokens": token},
            {"$pull": {"refresh_tokens": token}, "$set": {"updated_at": utcnow()}},
        )
        return result.modified_count == 1
