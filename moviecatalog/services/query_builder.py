"""Translate ``GET /movies`` query parameters into a MongoDB query."""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from bson import ObjectId

from moviecatalog.config import settings
from moviecatalog.errors import ValidationError
from moviecatalog.services.validator import current_year, parse_int

logger = logging.getLogger(__name__)

DEFAULT_SORT: list[tuple[str, int]] = [("year", 1)]

_OBJECT_ID = re.compile(r"^[0-9a-fA-F]{24}$")

# Presentation names -> stored fields.
_PROJECTION_ALIASES = {
    "id": ("_id",),
    "genre": ("genres", "genre"),
    "posterUrl": ("poster", "posterUrl"),
    "poster": ("poster", "posterUrl"),
}
_SORT_ALIASES = {"id": "_id", "genre": "genres", "posterUrl": "poster"}


@dataclass
class MovieQuery:
    filter: dict = field(default_factory=dict)
    sort: list[tuple[str, int]] = field(default_factory=lambda: list(DEFAULT_SORT))
    projection: dict[str, int] | None = None
    page: int = 1
    limit: int = settings.default_page_size

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def parse_object_id(value: str | None) -> ObjectId | None:
    """Return an ObjectId for a 24-hex string, else None."""
    if not isinstance(value, str) or not _OBJECT_ID.match(value.strip()):
        return None
    return ObjectId(value.strip())


def _parse_ids(raw: str) -> list[ObjectId]:
    ids = []
    for part in raw.split(","):
        oid = parse_object_id(part)
        if oid is not None and oid not in ids:
            ids.append(oid)
    return ids


def _parse_year(raw: str, min_year: int) -> int:
    year = parse_int(raw)
    if year is None:
        raise ValidationError(["Year must be an integer"], detail="Invalid year")
    if not min_year <= year <= current_year():
        raise ValidationError(["Year out of range"], detail="Invalid year")
    return year


def parse_projection(raw: str | None) -> dict[str, int] | None:
    if not raw:
        return None
    projection: dict[str, int] = {}
    for part in raw.split(","):
        name = part.strip()
        if not name:
            continue
        for stored in _PROJECTION_ALIASES.get(name, (name,)):
            projection[stored] = 1
    if not projection:
        return None
    projection["_id"] = 1
    return projection


def parse_sort(raw: str | None) -> list[tuple[str, int]]:
    """Loose ``field[:dir]`` parser; anything but ``desc`` sorts ascending."""
    if not raw:
        return list(DEFAULT_SORT)
    if raw in ("year", "year:asc"):
        return [("year", 1)]
    if raw == "year:desc":
        return [("year", -1)]
    name, _, direction = raw.partition(":")
    name = name.strip()
    if not name:
        return list(DEFAULT_SORT)
    direction = direction.split(":", 1)[0].strip().lower()
    return [(_SORT_ALIASES.get(name, name), -1 if direction == "desc" else 1)]


def _parse_window(
    page: str | None,
    limit: str | None,
    default_limit: int,
    max_limit: int,
) -> tuple[int, int]:
    page_num = parse_int(page) if page else None
    limit_num = parse_int(limit) if limit else None
    page_num = max(1, page_num if page_num is not None else 1)
    limit_num = limit_num if limit_num is not None else default_limit
    return page_num, min(max_limit, max(1, limit_num))


def build_query(
    params: Mapping[str, str | None],
    min_year: int = settings.min_query_year,
    default_limit: int = settings.default_page_size,
    max_limit: int = settings.max_page_size,
) -> MovieQuery:
    """Build filter, sort, projection and pagination from query parameters.

    Raises ValidationError when ``year`` is not an integer within
    ``[min_year, current year]``.
    """
    filters: dict = {}

    ids = params.get("ids")
    if ids:
        filters["_id"] = {"$in": _parse_ids(ids)}
    else:
        title = params.get("title")
        if title:
            filters["title"] = {"$regex": re.escape(title), "$options": "i"}
        genre = params.get("genre")
        if genre:
            filters["$or"] = [{"genre": genre}, {"genres": genre}]
        year = params.get("year")
        if year is not None:
            filters["year"] = _parse_year(year, min_year)

    page, limit = _parse_window(params.get("page"), params.get("limit"), default_limit, max_limit)
    query = MovieQuery(
        filter=filters,
        sort=parse_sort(params.get("sort")),
        projection=parse_projection(params.get("fields")),
        page=page,
        limit=limit,
    )
    logger.debug("Built movie query %s", query)
    return query
