"""Movie CRUD endpoints. Reads are public, writes need an admin session."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from moviecatalog.dependencies import require_admin
from moviecatalog.models import DeleteResponse, MovieListResponse, MovieOut, SessionUser
from moviecatalog.services.movies import MovieService
from moviecatalog.services.query_builder import build_query

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/movies", tags=["movies"])

_movies: MovieService | None = None


def init_router(movies: MovieService) -> None:
    global _movies
    _movies = movies


def _get_service() -> MovieService:
    assert _movies is not None, "movies router not initialized"
    return _movies


@router.get("", response_model=MovieListResponse, response_model_exclude_unset=True)
def list_movies(
    title: str | None = Query(None, description="Case-insensitive title substring"),
    genre: str | None = Query(None, description="Genre name"),
    year: str | None = Query(None, description="Exact release year"),
    sort: str | None = Query(None, description="field[:asc|desc], default year:asc"),
    fields: str | None = Query(None, description="Comma-separated fields to return"),
    ids: str | None = Query(None, description="Comma-separated movie ids; overrides other filters"),
    page: str | None = Query(None, description="Page number, from 1"),
    limit: str | None = Query(None, description="Results per page, 1-50"),
):
    """Search, filter, sort and paginate the catalog."""
    query = build_query({
        "title": title,
        "genre": genre,
        "year": year,
        "sort": sort,
        "fields": fields,
        "ids": ids,
        "page": page,
        "limit": limit,
    })
    return _get_service().list_movies(query)


@router.get("/{movie_id}", response_model=MovieOut, response_model_exclude_unset=True)
def get_movie(movie_id: str):
    return _get_service().get_movie(movie_id)


@router.post(
    "",
    status_code=201,
    response_model=MovieOut,
    response_model_exclude_unset=True,
)
def create_movie(
    payload: dict[str, Any] = Body(...),
    user: SessionUser = Depends(require_admin),
):
    logger.debug("Create movie requested by %s", user.username)
    return _get_service().create_movie(payload)


@router.put("/{movie_id}", response_model=MovieOut, response_model_exclude_unset=True)
def update_movie(
    movie_id: str,
    payload: dict[str, Any] = Body(...),
    user: SessionUser = Depends(require_admin),
):
    logger.debug("Update of movie %s requested by %s", movie_id, user.username)
    return _get_service().update_movie(movie_id, payload)


@router.delete("/{movie_id}", response_model=DeleteResponse)
def delete_movie(movie_id: str, user: SessionUser = Depends(require_admin)):
    logger.debug("Delete of movie %s requested by %s", movie_id, user.username)
    return _get_service().delete_movie(movie_id)
