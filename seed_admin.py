"""
seed_admin.py — Create the catalog indexes and the initial admin account.

Reads the usual MOVIE_CATALOG_* settings; the account comes from
MOVIE_CATALOG_ADMIN_USERNAME / MOVIE_CATALOG_ADMIN_PASSWORD.
Safe to re-run: an existing account is left as it is.
"""

import sys

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from moviecatalog.config import settings
from moviecatalog.models import Role
from moviecatalog.services.auth import AuthService
from moviecatalog.services.database import DatabaseService


def main() -> None:
    client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)
    db = DatabaseService(client, settings.mongo_db_name)
    try:
        print(f"Ensuring indexes on {settings.mongo_db_name}...")
        db.ensure_indexes()

        created = AuthService(db).ensure_user(
            settings.admin_username, settings.admin_password, Role.ADMIN
        )
        if created:
            print(f"User created: {settings.admin_username}")
        else:
            print(f"User already exists: {settings.admin_username}")
    except PyMongoError as exc:
        print(f"ERROR: Seed failed: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
