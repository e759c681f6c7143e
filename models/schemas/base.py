from datetime import timezone

from marshmallow import fields


class ObjectIdField(fields.Field):
    def _serialize(self, value, attr, obj, **kwargs):
        return None if value is None else str(value)


class UTCDateTime(fields.DateTime):
    """Dumps the naive UTC datetimes MongoDB returns as ISO 8601 with millisecond
    precision and a trailing Z, e.g. 2024-05-01T10:20:30.123Z."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
