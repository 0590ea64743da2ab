"""MongoDB database service which owns the shared client and its collections."""

import logging

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from moviecatalog.models import RelationKind

logger = logging.getLogger(__name__)


class DatabaseService:
    """Single pooled handle to the catalog database.

    Built once at startup and passed to every service; pymongo's client is
    safe to share across request threads.
    """

    def __init__(self, client: MongoClient, db_name: str):
        self._client = client
        self._db = client[db_name]
        logger.info("DatabaseService initialized with database %s", db_name)

    @property
    def movies(self) -> Collection:
        return self._db["movies"]

    @property
    def users(self) -> Collection:
        return self._db["users"]

    def relation(self, kind: RelationKind) -> Collection:
        return self._db[kind.value]

    def ensure_indexes(self) -> None:
        self.users.create_index([("username", ASCENDING)], unique=True)
        for kind in RelationKind:
            self.relation(kind).create_index(
                [("userId", ASCENDING), ("movieId", ASCENDING)], unique=True
            )
        logger.info("Indexes ensured")

    def health_check(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError:
            logger.exception("Database health check failed")
            return False

    def close(self) -> None:
        self._client.close()
