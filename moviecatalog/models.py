"""Pydantic request/response schemas for the movie catalog API."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def from_stored(cls, value: str | None) -> "Role":
        return cls.ADMIN if value == cls.ADMIN.value else cls.USER


class RelationKind(str, Enum):
    LIKES = "likes"
    WATCHLIST = "watchlist"


# Movies

class MovieOut(BaseModel):
    """A movie as returned to clients.

    Every field is optional because ``?fields=`` projections return a
    subset; routes dump with ``exclude_unset`` so only projected fields
    appear, while explicit ``None`` values survive as ``null``.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    title: str | None = None
    year: int | None = None
    genres: list[str] | None = None
    genre: str | None = None
    rating: float | None = None
    director: str | None = None
    poster: str | None = None
    posterUrl: str | None = None
    description: str | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class MovieListResponse(BaseModel):
    items: list[MovieOut]
    page: int
    limit: int
    total: int
    totalPages: int


class DeleteResponse(BaseModel):
    message: str
    id: str


# Auth

class SessionUser(BaseModel):
    id: str
    username: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class CredentialsRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class MeResponse(BaseModel):
    user: SessionUser


class MessageResponse(BaseModel):
    message: str


# Likes / watchlist

class RelationRequest(BaseModel):
    movieId: str | None = Field(None, examples=["65f1c0a2b3d4e5f6a7b8c9d0"])


class RelationListResponse(BaseModel):
    items: list[str]


class HealthResponse(BaseModel):
    status: str
    database: bool
