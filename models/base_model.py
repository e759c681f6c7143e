#!/usr/bin/env python3
"""
Shared base for the document models of the Blog API.

- ObjectId primary key stored under `_id`
- created_at / updated_at timestamps (naive UTC, as pymongo returns them)
- save() and delete() that use the DBStorage singleton
- to_document() / from_document() to move between objects and MongoDB documents
- to_dict() for debugging and logging, never containing secrets

Subclasses declare `__collection__` and `__fields__` (the persisted attributes besides
the id and timestamps) plus class-level defaults for optional fields.
"""

from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py
import models

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"


def utcnow() -> datetime:
    """Current UTC time without tzinfo, cut to the millisecond precision BSON dates keep."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class BaseModel:
    """
    Base class for all persistent models.

    Attributes are set from kwargs; unknown keys are ignored so documents written by
    older versions of the app still load.
    """

    __collection__: str = ""
    __fields__: tuple = ()
    __secret_fields__: tuple = ()

    def __init__(self, **kwargs):
        self.id = kwargs.pop("_id", None) or kwargs.pop("id", None) or ObjectId()
        now = utcnow()
        self.created_at = kwargs.pop("created_at", None) or now
        self.updated_at = kwargs.pop("updated_at", None) or self.created_at
        for key in self.__fields__:
            if key in kwargs:
                setattr(self, key, kwargs[key])

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.to_dict()}"

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    @classmethod
    def from_document(cls, doc: dict):
        return cls(**doc)

    def to_document(self) -> dict:
        doc = {"_id": self.id, "created_at": self.created_at, "updated_at": self.updated_at}
        for key in self.__fields__:
            doc[key] = getattr(self, key)
        return doc

    def save(self):
        """Bump updated_at and write the document back."""
        self.updated_at = utcnow()
        models.storage.save(self)

    def delete(self):
        models.storage.delete(self)

    def to_dict(self) -> dict:
        """Plain dict of the public fields with formatted timestamps and a __class__ key."""
        d = self.to_document()
        for key in self.__secret_fields__:
            d.pop(key, None)
        d["_id"] = str(d["_id"])
        for key in ("created_at", "updated_at"):
            if isinstance(d.get(key), datetime):
                d[key] = d[key].strftime(TIME_FMT)
        d["__class__"] = self.__class__.__name__
        return d
