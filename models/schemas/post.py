from marshmallow import EXCLUDE, Schema, fields, validate

from models.schemas.base import ObjectIdField, UTCDateTime
from models.schemas.common import OwnerField

_not_blank = validate.Length(min=1, error="Title and content are required")


class PostCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=_not_blank)
    content = fields.String(required=True, validate=_not_blank)


class PostUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Empty values are ignored rather than rejected
    title = fields.String(allow_none=True)
    content = fields.String(allow_none=True)


class PostOutSchema(Schema):
    id = ObjectIdField(attribute="id", data_key="_id")
    title = fields.String()
    content = fields.String()
    owner = OwnerField()
    created_at = UTCDateTime(data_key="createdAt")
    updated_at = UTCDateTime(data_key="updatedAt")
