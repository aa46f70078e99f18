"""FastAPI application factory."""

import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from moneytrack.api.routes import categories, goals, transactions, users
from moneytrack.database.base import Database
from moneytrack.domain.errors import DomainError, NotFoundError

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map errors to ``{"error": message}`` responses."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = 404 if isinstance(exc, NotFoundError) else 400
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(db: Database, clock: Optional[Callable[[], datetime]] = None) -> FastAPI:
    """Build the API application.

    Args:
        db: Database used by every request
        clock: Returns the reference time for date-dependent logic;
            defaults to datetime.now
    """
    app = FastAPI(title="moneytrack API")
    app.state.db = db
    app.state.clock = clock or datetime.now

    register_exception_handlers(app)

    @app.get("/")
    def index() -> dict:
        return {
            "message": "moneytrack API is running",
            "endpoints": {
                "users": "/users",
                "transactions": "/transactions",
                "goals": "/goals",
                "categories": "/categories",
            },
        }

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    users.register_routes(app)
    transactions.register_routes(app)
    goals.register_routes(app)
    categories.register_routes(app)

    return app
