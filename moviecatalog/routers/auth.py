"""Session login, registration and logout."""

import logging

from fastapi import APIRouter, Depends, Request

from moviecatalog.dependencies import end_session, require_auth, start_session
from moviecatalog.models import CredentialsRequest, MeResponse, MessageResponse, SessionUser
from moviecatalog.services.auth import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

_auth: AuthService | None = None


def init_router(auth: AuthService) -> None:
    global _auth
    _auth = auth


def _get_service() -> AuthService:
    assert _auth is not None, "auth router not initialized"
    return _auth


@router.post("/login", response_model=MessageResponse)
def login(body: CredentialsRequest, request: Request):
    user = _get_service().login(body.username, body.password)
    start_session(request, user)
    logger.info("User %s logged in (role=%s)", user.username, user.role.value)
    return MessageResponse(message="ok")


@router.post("/register", status_code=201, response_model=MessageResponse)
def register(body: CredentialsRequest, request: Request):
    user = _get_service().register(body.username, body.password)
    start_session(request, user)
    return MessageResponse(message="ok")


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request):
    end_session(request)
    return MessageResponse(message="ok")


@router.get("/me", response_model=MeResponse)
def me(user: SessionUser = Depends(require_auth)):
    return MeResponse(user=user)
