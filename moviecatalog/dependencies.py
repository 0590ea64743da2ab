"""
FastAPI dependencies that resolve the session identity and gate routes by role.
"""

import logging

from fastapi import Depends, Request

from moviecatalog.errors import Forbidden, Unauthenticated
from moviecatalog.models import Role, SessionUser

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


def get_session_user(request: Request) -> SessionUser | None:
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    return SessionUser(
        id=data["id"],
        username=data["username"],
        role=Role.from_stored(data.get("role")),
    )


def start_session(request: Request, user: SessionUser) -> None:
    request.session[SESSION_KEY] = {
        "id": user.id,
        "username": user.username,
        "role": user.role.value,
    }


def end_session(request: Request) -> None:
    request.session.clear()


def require_auth(request: Request) -> SessionUser:
    user = get_session_user(request)
    if user is None:
        raise Unauthenticated()
    return user


def require_admin(user: SessionUser = Depends(require_auth)) -> SessionUser:
    if not user.is_admin:
        logger.warning("User %s (%s) denied admin route", user.username, user.role.value)
        raise Forbidden()
    return user
