"""Movie resource service: list, get, create, update and delete over the movies collection."""

import logging
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import ReturnDocument

from moviecatalog.errors import BadRequest, InvalidArgument, NotFound, ValidationError
from moviecatalog.services.database import DatabaseService
from moviecatalog.services.query_builder import MovieQuery, parse_object_id
from moviecatalog.services.validator import ValidationMode, validate_movie

logger = logging.getLogger(__name__)

DEFAULT_GENRE = "general"

# Stored legacy fields shadowed by a canonical one.
_LEGACY_FIELDS = {"genres": "genre", "poster": "posterUrl"}


def present_movie(doc: dict) -> dict:
    """Map a stored document to its client shape.

    Storage keeps one canonical field per value; the legacy ``genre`` and
    ``posterUrl`` names are derived here. Fields missing from a projected
    document stay missing.
    """
    movie = {k: v for k, v in doc.items() if k != "_id"}
    movie["id"] = str(doc["_id"])

    if "genres" in doc or "genre" in doc:
        genres = doc.get("genres") or []
        movie["genre"] = genres[0] if genres else (doc.get("genre") or DEFAULT_GENRE)

    if "poster" in doc or "posterUrl" in doc:
        poster = doc.get("poster") or doc.get("posterUrl")
        movie["poster"] = poster
        movie["posterUrl"] = poster
    return movie


def _require_id(movie_id: str) -> ObjectId:
    oid = parse_object_id(movie_id)
    if oid is None:
        raise InvalidArgument()
    return oid


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MovieService:
    def __init__(self, db: DatabaseService):
        self._db = db

    def list_movies(self, query: MovieQuery) -> dict:
        collection = self._db.movies
        cursor = (
            collection.find(query.filter, query.projection)
            .sort(query.sort)
            .skip(query.skip)
            .limit(query.limit)
        )
        items = [present_movie(doc) for doc in cursor]
        total = collection.count_documents(query.filter)
        return {
            "items": items,
            "page": query.page,
            "limit": query.limit,
            "total": total,
            "totalPages": query.total_pages(total),
        }

    def get_movie(self, movie_id: str) -> dict:
        doc = self._db.movies.find_one({"_id": _require_id(movie_id)})
        if doc is None:
            raise NotFound()
        return present_movie(doc)

    def create_movie(self, payload: dict) -> dict:
        result = validate_movie(payload, ValidationMode.CREATE)
        if not result.ok:
            raise ValidationError(result.errors)

        patch = result.patch
        doc = {
            "title": patch["title"],
            "year": patch["year"],
            "genres": patch["genres"],
            "rating": patch.get("rating"),
            "director": patch.get("director"),
            "poster": patch.get("poster"),
            "description": patch.get("description"),
            "createdAt": _now(),
        }
        inserted = self._db.movies.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        logger.info("Created movie %s (%r)", inserted.inserted_id, doc["title"])
        return present_movie(doc)

    def update_movie(self, movie_id: str, payload: dict) -> dict:
        oid = _require_id(movie_id)
        result = validate_movie(payload, ValidationMode.UPDATE)
        if not result.ok:
            raise ValidationError(result.errors)
        if not result.patch:
            raise BadRequest("No fields to update")

        changes = dict(result.patch, updatedAt=_now())
        update: dict = {"$set": changes}
        legacy = {_LEGACY_FIELDS[name]: "" for name in changes if name in _LEGACY_FIELDS}
        if legacy:
            update["$unset"] = legacy

        doc = self._db.movies.find_one_and_update(
            {"_id": oid}, update, return_document=ReturnDocument.AFTER
        )
        if doc is None:
            raise NotFound()
        logger.info("Updated movie %s fields=%s", oid, sorted(result.patch))
        return present_movie(doc)

    def delete_movie(self, movie_id: str) -> dict:
        oid = _require_id(movie_id)
        deleted = self._db.movies.delete_one({"_id": oid})
        if deleted.deleted_count == 0:
            raise NotFound()
        logger.info("Deleted movie %s", oid)
        return {"message": "Movie deleted successfully", "id": str(oid)}
