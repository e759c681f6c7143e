from marshmallow import EXCLUDE, Schema, fields, pre_load


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("email"), str):
            data = dict(data, email=data["email"].strip().lower())
        return data


class AuthOutSchema(Schema):
    """Register/login response: the user plus a fresh token pair."""

    id = fields.Function(lambda obj: str(obj["user"].id), data_key="_id")
    username = fields.Function(lambda obj: obj["user"].username)
    email = fields.Function(lambda obj: obj["user"].email)
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")


class TokenPairOutSchema(Schema):
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")
