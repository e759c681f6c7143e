from __future__ import annotations

import logging
from os import getenv

from bson import ObjectId
from dotenv import load_dotenv
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from models.comment import Comment
from models.post import Post
from models.user import User

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_MONGODB_URI = "mongodb://localhost:27017/assignment2"
DEFAULT_DB_NAME = "assignment2"

# Map model names for easy querying
classes = {
    "User": User,
    "Post": Post,
    "Comment": Comment,
}


class DBStorage:
    __client = None
    __db = None

    def reload(self, uri: str | None = None, db_name: str | None = None, client=None):
        """Connect (or reconnect) and make sure indexes exist.

        `client` lets callers hand in an already built client, e.g. a mongomock one.
        """
        uri = uri or getenv("MONGODB_URI", DEFAULT_MONGODB_URI)
        if self.__client is not None and self.__client is not client:
            self.close()
        self.__client = client if client is not None else MongoClient(uri)
        if client is None:
            self.__db = self.__client.get_default_database(default=db_name or DEFAULT_DB_NAME)
        else:
            self.__db = self.__client[db_name or DEFAULT_DB_NAME]
        self._ensure_indexes()
        logger.info("Connected to MongoDB database %s", self.__db.name)

    def _ensure_indexes(self):
        users = self.__db[User.__collection__]
        users.create_index([("username", ASCENDING)], unique=True)
        users.create_index([("email", ASCENDING)], unique=True)
        users.create_index([("refresh_tokens", ASCENDING)])
        self.__db[Post.__collection__].create_index([("created_at", ASCENDING)])
        self.__db[Comment.__collection__].create_index([("post", ASCENDING)])

    def collection(self, cls):
        """Raw pymongo collection for a model class (filters, atomic updates, ...)."""
        return self.__db[cls.__collection__]

    def all(self, cls, query: dict | None = None, sort: list | None = None) -> list:
        """Query objects"""
        cursor = self.collection(cls).find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        return [cls.from_document(doc) for doc in cursor]

    def find_one(self, cls, query: dict):
        doc = self.collection(cls).find_one(query)
        return cls.from_document(doc) if doc else None

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls not in classes.values() or not isinstance(id, ObjectId):
            return None
        return self.find_one(cls, {"_id": id})

    def new(self, obj):
        """Insert a new document"""
        self.collection(type(obj)).insert_one(obj.to_document())

    def save(self, obj):
        """Write the whole document back"""
        self.collection(type(obj)).replace_one({"_id": obj.id}, obj.to_document(), upsert=True)

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self.collection(type(obj)).delete_one({"_id": obj.id})

    def count(self, cls=None):
        """Count objects"""
        if cls:
            return self.collection(cls).count_documents({})
        return sum(self.collection(model).count_documents({}) for model in classes.values())

    def ping(self) -> bool:
        try:
            self.__client.admin.command("ping")
        except PyMongoError:
            logger.exception("MongoDB ping failed")
            return False
        return True

    def close(self):
        """Drop the client (process shutdown)"""
        if self.__client is not None:
            self.__client.close()
            self.__client = None
            self.__db = None
