from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "mymovie"
    mongo_timeout_ms: int = 5000

    session_secret: str
    session_cookie: str = "sid"
    session_max_age: int = 14 * 24 * 60 * 60
    session_https_only: bool = False

    # Write-side bound is an entity invariant; the read-side bound only
    # sanity-checks the ?year= filter.
    min_movie_year: int = 1888
    min_query_year: int = 1800
    max_genres: int = 6
    default_page_size: int = 12
    max_page_size: int = 50

    admin_username: str = "admin"
    admin_password: str = "admin123"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_prefix": "MOVIE_CATALOG_"}


settings = Settings()
