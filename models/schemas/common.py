from flask import g
from marshmallow import fields

from models import storage
from models.schemas.user import OwnerOutSchema
from models.user import User

owner_out_schema = OwnerOutSchema()


def _owner_cache() -> dict:
    if "owners" not in g:
        g.owners = {}
    return g.owners


def prefetch_owners(objs):
    """Load the owners of `objs` with a single query so dumping a list does not
    look up one user per item."""
    cache = _owner_cache()
    missing = {obj.owner for obj in objs if obj.owner is not None and obj.owner not in cache}
    if not missing:
        return
    found = {user.id: user for user in storage.all(User, {"_id": {"$in": list(missing)}})}
    for owner_id in missing:
        cache[owner_id] = found.get(owner_id)


class OwnerField(fields.Field):
    """Dumps an owner ObjectId as the embedded user, or the bare id if the user is gone."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        cache = _owner_cache()
        if value not in cache:
            cache[value] = storage.get(User, value)
        user = cache[value]
        if user is None:
            return str(value)
        return owner_out_schema.dump(user)
