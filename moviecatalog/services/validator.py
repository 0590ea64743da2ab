"""
Movie payload validation.

Turns a submitted JSON body into a canonical patch: a dict holding only the
fields the caller supplied, already trimmed and typed. In ``create`` mode the
required fields must be present; in ``update`` mode only the supplied fields
are checked. Validation is all-or-nothing: any error message means the patch
must not be applied.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from moviecatalog.config import settings

logger = logging.getLogger(__name__)

RATING_MIN = 0
RATING_MAX = 10

_TEXT_FIELDS = ("director", "description")


class ValidationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass
class ValidationResult:
    patch: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def current_year() -> int:
    return datetime.now(timezone.utc).year


def parse_int(value: Any) -> int | None:
    """Parse an integral value the way a loose JSON client sends it.

    Accepts ints, integral floats and integer strings. Booleans are not
    numbers here.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def _parse_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_genres(genre: Any, genres: Any, max_genres: int) -> list[str] | None:
    """Merge the ``genres`` list and the legacy ``genre`` string.

    Returns None when an entry is not a string. Entries are trimmed, blanks
    and repeats dropped, and the result capped at ``max_genres``.
    """
    if isinstance(genres, str):
        genres = [genres]
    items = list(genres) if isinstance(genres, list) else []
    if not items and isinstance(genre, str):
        items = [genre]

    normalized: list[str] = []
    for item in items:
        if not isinstance(item, str):
            return None
        text = item.strip()
        if text and text not in normalized:
            normalized.append(text)
    return normalized[:max_genres]


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def validate_movie(
    payload: dict[str, Any],
    mode: ValidationMode,
    min_year: int = settings.min_movie_year,
    max_genres: int = settings.max_genres,
) -> ValidationResult:
    creating = mode is ValidationMode.CREATE
    result = ValidationResult()
    errors = result.errors
    patch = result.patch

    if creating or "title" in payload:
        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            errors.append("title must be a non-empty string")
        else:
            patch["title"] = title.strip()

    if creating or "year" in payload:
        max_year = current_year() + 1
        year = parse_int(payload.get("year"))
        if year is None or not min_year <= year <= max_year:
            errors.append(f"year must be an integer between {min_year} and {max_year}")
        else:
            patch["year"] = year

    if creating or "genre" in payload or "genres" in payload:
        genres = normalize_genres(payload.get("genre"), payload.get("genres"), max_genres)
        if genres is None:
            errors.append("each genre must be a non-empty string")
        elif not genres:
            errors.append(f"genres must contain 1-{max_genres} items")
        else:
            patch["genres"] = genres

    if "rating" in payload:
        raw = payload["rating"]
        if raw is None or raw == "":
            patch["rating"] = None
        else:
            rating = _parse_number(raw)
            if rating is None or not RATING_MIN <= rating <= RATING_MAX:
                errors.append(f"rating must be a number between {RATING_MIN} and {RATING_MAX}")
            else:
                patch["rating"] = rating

    for name in _TEXT_FIELDS:
        if name in payload:
            value = payload[name]
            if value is not None and not isinstance(value, (str, int, float)):
                errors.append(f"{name} must be a string")
            else:
                patch[name] = _optional_text(value)

    if "poster" in payload or "posterUrl" in payload:
        poster = payload.get("poster") or payload.get("posterUrl")
        if poster is not None and not isinstance(poster, str):
            errors.append("poster must be a string")
        else:
            patch["poster"] = _optional_text(poster)

    if errors:
        logger.debug("Movie payload rejected (%s): %s", mode.value, errors)
        result.patch = {}
    return result
