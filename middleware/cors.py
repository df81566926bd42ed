"""CORS allowlist middleware"""
from typing import List, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from .error_handler import build_error_response
from logging_config import get_logger


logger = get_logger(__name__)

ALLOWED_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"


class CORSAllowlistMiddleware(BaseHTTPMiddleware):
    """Allow cross-origin requests from a fixed list of origins"""

    def __init__(self, app, allowlist: Optional[List[str]] = None):
        super().__init__(app)
        self.allowlist = allowlist or []

    def is_allowed(self, origin: str) -> bool:
        return origin in self.allowlist

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Reject unknown origins, answer preflights and add CORS headers"""
        origin = request.headers.get("origin")

        # Same-origin and non-browser clients send no Origin header
        if not origin:
            return await call_next(request)

        if not self.is_allowed(origin):
            logger.warning(
                "Origin rejected by CORS policy",
                origin=origin,
                method=request.method,
                path=request.url.path,
                module="http",
                event_type="cors_rejected"
            )
            return build_error_response(request, 403, "Not allowed by CORS")

        if request.method == "OPTIONS" and "access-control-request-method" in request.headers:
            response = Response(status_code=200)
            response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
            requested_headers = request.headers.get("access-control-request-headers")
            if requested_headers:
                response.headers["Access-Control-Allow-Headers"] = requested_headers
        else:
            response = await call_next(request)

        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"
        return response
