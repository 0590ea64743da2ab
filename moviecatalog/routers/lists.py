"""Session-scoped likes and watchlist endpoints.

Both lists share one shape, so each gets a router built by ``_build_router``.
The acting user is always the session's own id.
"""

from fastapi import APIRouter, Depends

from moviecatalog.dependencies import require_auth
from moviecatalog.models import RelationKind, RelationListResponse, RelationRequest, SessionUser
from moviecatalog.services.relations import RelationService

_services: dict[RelationKind, RelationService] = {}


def init_router(services: list[RelationService]) -> None:
    _services.clear()
    for service in services:
        _services[service.kind] = service


def _get_service(kind: RelationKind) -> RelationService:
    assert kind in _services, f"{kind.value} router not initialized"
    return _services[kind]


def _build_router(kind: RelationKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.value}", tags=[kind.value])

    @router.get("", response_model=RelationListResponse)
    def list_items(user: SessionUser = Depends(require_auth)):
        return RelationListResponse(items=_get_service(kind).list_ids(user.id))

    @router.post("", response_model=RelationListResponse)
    def add_item(body: RelationRequest, user: SessionUser = Depends(require_auth)):
        return RelationListResponse(items=_get_service(kind).add(user.id, body.movieId))

    @router.delete("/{movie_id}", response_model=RelationListResponse)
    def remove_item(movie_id: str, user: SessionUser = Depends(require_auth)):
        return RelationListResponse(items=_get_service(kind).remove(user.id, movie_id))

    return router


likes_router = _build_router(RelationKind.LIKES)
watchlist_router = _build_router(RelationKind.WATCHLIST)
