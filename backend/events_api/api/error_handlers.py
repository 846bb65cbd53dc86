"""
Global exception handlers.

Every error body has the shape {"error": message, ...details}:
    - ApiError -> its own status and to_response()
    - RequestValidationError -> 400 with the first failing location. Event routes
      read bodies through read_json_object, so this only fires for typed
      parameters added later
    - HTTPException (unknown route, wrong method) -> its status, echoing method and path

Unexpected exceptions are not handled here; RequestLoggingMiddleware logs
them and answers 500.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from events_api.core.errors import ApiError, ValidationError
from events_api.core.logging import get_logger
from events_api.core.metrics import record_validation_rejection

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)


def _register_api_error_handler(app: FastAPI) -> None:

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if isinstance(exc, ValidationError):
            record_validation_rejection(exc.field, exc.code)
        logger.info(
            "request_rejected",
            error=exc.message,
            status_code=exc.http_status,
            error_type=type(exc).__name__,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {"loc": (), "msg": "Invalid request"}
        field = ".".join(str(loc) for loc in first["loc"])
        logger.warning("request_validation_failed", field=field, errors=len(errors))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": first["msg"], "field": field},
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "method": request.method, "path": request.url.path},
            headers=getattr(exc, "headers", None),
        )
