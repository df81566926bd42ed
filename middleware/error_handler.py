"""Generic error handler"""
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from logging_config import get_logger


logger = get_logger(__name__)


def is_xhr(request: Request) -> bool:
    """Check if the request was issued by XMLHttpRequest"""
    return request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"


def build_error_response(request: Request, status_code: int, message: str, name: str = "Error") -> JSONResponse:
    """Build the JSON error body used for every failed request"""
    if is_xhr(request):
        content = {
            "title": "Error",
            "errors": [
                {
                    "name": name,
                    "code": status_code,
                    "message": message,
                }
            ],
        }
    else:
        content = {
            "message": message,
            "error": message,
        }
    return JSONResponse(content, status_code=status_code)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Log an unhandled exception and convert it to a JSON error response"""
    status_code = getattr(exc, "status_code", None)
    if not isinstance(status_code, int):
        status_code = 500

    logger.error(
        f"[{request.method} {request.url.path}] {exc}",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
        module="http",
        event_type="http_error",
        exc_info=exc
    )

    return build_error_response(request, status_code, str(exc), type(exc).__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert route exceptions into error responses inside the middleware stack.

    Added before every other middleware so the error response still passes
    back through CORS and request logging.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unexpected_error(request, exc)


def register_error_handlers(app: FastAPI) -> None:
    """Install the fallback handler for errors raised outside the middleware stack"""
    app.add_exception_handler(Exception, handle_unexpected_error)
