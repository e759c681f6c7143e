from marshmallow import EXCLUDE, Schema, fields, validate

from models.schemas.base import ObjectIdField, UTCDateTime
from models.schemas.common import OwnerField


class CommentContentSchema(Schema):
    """Body of both comment creation and comment update."""

    class Meta:
        unknown = EXCLUDE

    content = fields.String(required=True, validate=validate.Length(min=1, error="Content is required"))


class CommentOutSchema(Schema):
    id = ObjectIdField(attribute="id", data_key="_id")
    post = ObjectIdField()
    content = fields.String()
    owner = OwnerField()
    created_at = UTCDateTime(data_key="createdAt")
    updated_at = UTCDateTime(data_key="updatedAt")
