"""FastAPI application entry point with lifespan, logging, sessions, and error handlers."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from starlette.middleware.sessions import SessionMiddleware

from moviecatalog.config import settings
from moviecatalog.errors import CatalogError, ValidationError
from moviecatalog.models import HealthResponse, RelationKind
from moviecatalog.routers import auth, lists, movies
from moviecatalog.services.auth import AuthService
from moviecatalog.services.database import DatabaseService
from moviecatalog.services.movies import MovieService
from moviecatalog.services.relations import RelationService

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "An internal error occurred. Please try again."


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)
    db = DatabaseService(client, settings.mongo_db_name)
    db.ensure_indexes()

    movies.init_router(MovieService(db))
    auth.init_router(AuthService(db))
    lists.init_router([RelationService(db, kind) for kind in RelationKind])

    app.state.db = db

    logger.info("Application started: db=%s", settings.mongo_db_name)
    yield
    logger.info("Application shutting down")
    db.close()


app = FastAPI(
    title="Movie Catalog API",
    description=(
        "Movie catalog with public search, admin-only editing, and per-user "
        "likes and watchlist behind session login."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.session_https_only,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d  (%.0f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=ValidationError(errors).to_dict())


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_DETAIL})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_DETAIL})


@app.get("/", tags=["system"])
def root():
    return {"message": "Movie Catalog API", "docs": "/docs", "health": "/health"}


@app.get("/health", response_model=HealthResponse, tags=["system"])
def health():
    """Check database connectivity."""
    db: DatabaseService = app.state.db
    db_ok = db.health_check()
    return HealthResponse(status="healthy" if db_ok else "degraded", database=db_ok)


app.include_router(movies.router)
app.include_router(auth.router)
app.include_router(lists.likes_router)
app.include_router(lists.watchlist_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
