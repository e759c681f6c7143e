from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from models.schemas.base import UTCDateTime


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class UserCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True, validate=validate.Length(min=3))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6))
    profile_picture = fields.String(data_key="profilePicture", allow_none=True, load_default="")
    bio = fields.String(allow_none=True, load_default="", validate=validate.Length(max=500))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if "email" in data:
                data["email"] = _norm_email(data["email"])
            if "username" in data:
                data["username"] = _strip(data["username"])
        return data


class UserUpdateSchema(UserCreateSchema):
    """Same rules as creation but every field is optional and nothing is defaulted."""

    username = fields.String(validate=validate.Length(min=3))
    email = fields.Email()
    password = fields.String(load_only=True, validate=validate.Length(min=6))
    profile_picture = fields.String(data_key="profilePicture", allow_none=True)
    bio = fields.String(allow_none=True, validate=validate.Length(max=500))


class UserOutSchema(Schema):
    id = fields.Function(lambda obj: str(obj.id), data_key="_id")
    username = fields.String()
    email = fields.String()
    profile_picture = fields.String(data_key="profilePicture", allow_none=True)
    bio = fields.String(allow_none=True)
    created_at = UTCDateTime(data_key="createdAt")
    updated_at = UTCDateTime(data_key="updatedAt")


class OwnerOutSchema(Schema):
    """The slice of a user embedded into posts and comments."""

    id = fields.Function(lambda obj: str(obj.id), data_key="_id")
    username = fields.String()
    email = fields.String()
    profile_picture = fields.String(data_key="profilePicture", allow_none=True)
