"""Domain errors raised by the services and rendered by the handlers in main.py."""


class CatalogError(Exception):
    status_code = 500
    detail = "An internal error occurred. Please try again."

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class ValidationError(CatalogError):
    status_code = 400
    detail = "Validation error"

    def __init__(self, errors: list[str], detail: str | None = None):
        self.errors = list(errors)
        super().__init__(detail)

    def to_dict(self) -> dict:
        return {"detail": self.detail, "errors": self.errors}


class InvalidArgument(CatalogError):
    status_code = 400
    detail = "Invalid id"


class BadRequest(CatalogError):
    status_code = 400
    detail = "Bad request"


class InvalidCredentials(CatalogError):
    status_code = 401
    detail = "Invalid credentials"

    def __init__(self, status_code: int = 401):
        self.status_code = status_code
        super().__init__()


class Unauthenticated(CatalogError):
    status_code = 401
    detail = "Not authenticated"


class Forbidden(CatalogError):
    status_code = 403
    detail = "Admin role required"


class NotFound(CatalogError):
    status_code = 404
    detail = "Movie not found"
