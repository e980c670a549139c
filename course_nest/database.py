# course_nest/database.py
import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.server_api import ServerApi

from course_nest.config import DEFAULT_DB_NAME

logger = logging.getLogger("course_nest.database")

COURSES = "courses"
ENROLLMENTS = "enrollments"
PROGRESS = "progress"
REVIEWS = "reviews"


class Database:
    """Process-wide MongoDB handle, created once at startup and closed on shutdown"""

    def __init__(self, uri: Optional[str] = None, db_name: str = DEFAULT_DB_NAME,
                 client: Optional[MongoClient] = None):
        self._uri = uri
        self._client = client
        self.db_name = db_name

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(
                self._uri,
                server_api=ServerApi("1", strict=True, deprecation_errors=True),
            )
        return self._client

    def connect(self):
        """Ping the deployment so a bad connection string fails at startup"""
        self.client.admin.command("ping")
        logger.info("Pinged your deployment. Connected to MongoDB!")

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")

    def collection(self, name: str) -> Collection:
        return self.client[self.db_name][name]


def to_object_id(value: Any) -> ObjectId:
    """Convert a string identity into an ObjectId, raising InvalidId when malformed"""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidId(f"{value!r} is not a valid ObjectId")
    return ObjectId(value)


def serialize_document(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is None:
        return None
    formatted = dict(document)
    if "_id" in formatted:
        formatted["_id"] = str(formatted["_id"])
    return formatted
