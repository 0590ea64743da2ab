"""Per-user movie sets (likes, watchlist) with idempotent membership."""

import logging
from datetime import datetime, timezone

from bson import ObjectId

from moviecatalog.errors import InvalidArgument
from moviecatalog.models import RelationKind
from moviecatalog.services.database import DatabaseService
from moviecatalog.services.query_builder import parse_object_id

logger = logging.getLogger(__name__)


class RelationService:
    """One relation kind; every method is scoped to a single user id."""

    def __init__(self, db: DatabaseService, kind: RelationKind):
        self.kind = kind
        self._collection = db.relation(kind)

    def list_ids(self, user_id: str) -> list[str]:
        cursor = self._collection.find({"userId": user_id}, {"movieId": 1})
        return [str(doc["movieId"]) for doc in cursor]

    def add(self, user_id: str, movie_id: str | None) -> list[str]:
        oid = self._movie_oid(movie_id)
        result = self._collection.update_one(
            {"userId": user_id, "movieId": oid},
            {"$setOnInsert": {"createdAt": datetime.now(timezone.utc)}},
            upsert=True,
        )
        if result.upserted_id is not None:
            logger.info("%s: user %s added movie %s", self.kind.value, user_id, oid)
        return self.list_ids(user_id)

    def remove(self, user_id: str, movie_id: str | None) -> list[str]:
        oid = self._movie_oid(movie_id)
        result = self._collection.delete_one({"userId": user_id, "movieId": oid})
        if result.deleted_count:
            logger.info("%s: user %s removed movie %s", self.kind.value, user_id, oid)
        return self.list_ids(user_id)

    @staticmethod
    def _movie_oid(movie_id: str | None) -> ObjectId:
        oid = parse_object_id(movie_id)
        if oid is None:
            raise InvalidArgument("Invalid movie id")
        return oid
