"""Username/password accounts stored in the users collection.

Every failure surfaces as the same ``Invalid credentials`` error so callers
cannot tell an unknown username from a wrong password.
"""

import logging
from datetime import datetime, timezone

from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from moviecatalog.errors import InvalidCredentials
from moviecatalog.models import Role, SessionUser
from moviecatalog.services.database import DatabaseService

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def _clean(username: str | None, password: str | None) -> tuple[str, str] | None:
    if not isinstance(username, str) or not isinstance(password, str):
        return None
    username = username.strip()
    if not username or not password:
        return None
    return username, password


class AuthService:
    def __init__(self, db: DatabaseService):
        self._users = db.users

    def login(self, username: str | None, password: str | None) -> SessionUser:
        cleaned = _clean(username, password)
        if cleaned is None:
            raise InvalidCredentials(status_code=400)
        username, password = cleaned

        user = self._users.find_one({"username": username})
        if not user or not user.get("passwordHash"):
            logger.warning("Login failed for %r", username)
            raise InvalidCredentials()
        if not check_password_hash(user["passwordHash"], password):
            logger.warning("Login failed for %r", username)
            raise InvalidCredentials()

        return SessionUser(
            id=str(user["_id"]),
            username=user["username"],
            role=Role.from_stored(user.get("role")),
        )

    def register(self, username: str | None, password: str | None) -> SessionUser:
        cleaned = _clean(username, password)
        if (
            cleaned is None
            or len(cleaned[0]) < MIN_USERNAME_LENGTH
            or len(cleaned[1]) < MIN_PASSWORD_LENGTH
        ):
            raise InvalidCredentials(status_code=400)
        username, password = cleaned

        if self._users.find_one({"username": username}):
            raise InvalidCredentials(status_code=400)
        try:
            result = self._users.insert_one({
                "username": username,
                "passwordHash": generate_password_hash(password),
                "role": Role.USER.value,
                "createdAt": datetime.now(timezone.utc),
            })
        except DuplicateKeyError:
            raise InvalidCredentials(status_code=400)

        logger.info("Registered user %r", username)
        return SessionUser(id=str(result.inserted_id), username=username, role=Role.USER)

    def ensure_user(self, username: str, password: str, role: Role) -> bool:
        """Create the account if the username is free. Returns True if created."""
        if self._users.find_one({"username": username}):
            return False
        self._users.insert_one({
            "username": username,
            "passwordHash": generate_password_hash(password),
            "role": role.value,
            "createdAt": datetime.now(timezone.utc),
        })
        logger.info("Created %s account %r", role.value, username)
        return True
