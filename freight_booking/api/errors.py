"""Exception handlers rendering every failure as ``{"error": <message>}``."""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core import get_logger
from freight_booking.core_settings import get_settings
from freight_booking.application.validation import describe_error

logger = get_logger(__name__)

INTERNAL_ERROR = "Erreur interne du serveur"

# Default Starlette details raised by the router itself
ROUTING_ERRORS = {
    404: "Route non trouvée",
    405: "Méthode non autorisée",
}


def _internal_error(exc: Exception) -> JSONResponse:
    content = {"error": INTERNAL_ERROR}
    if get_settings().is_development:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if exc.status_code in ROUTING_ERRORS and detail == HTTPStatus(exc.status_code).phrase:
            detail = ROUTING_ERRORS[exc.status_code]
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = describe_error(errors[0]) if errors else "Requête invalide"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return _internal_error(exc)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return _internal_error(exc)
