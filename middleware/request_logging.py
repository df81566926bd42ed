"""HTTP request logging middleware"""
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from metrics.collector import NamespacedMetrics, current_millis
from logging_config import get_logger


logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and record request metrics.

    Successful responses are logged at debug level only; responses with a
    status of 400 or above are logged at info level.
    """

    def __init__(self, app, metrics: NamespacedMetrics):
        super().__init__(app)
        self.metrics = metrics

    def _record(self, request: Request, status_code: int, start_time: float) -> None:
        self.metrics.increment_counter(
            "requests_total", 1,
            {"method": request.method, "status": str(status_code)}
        )
        self.metrics.record_timing("request_duration_ms", start_time, {"method": request.method})

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Log HTTP requests"""
        start_time = current_millis()

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = current_millis() - start_time
            self._record(request, 500, start_time)
            logger.error(
                "HTTP request failed",
                method=request.method,
                url=str(request.url),
                error=str(e),
                error_type=type(e).__name__,
                process_time_ms=round(process_time, 3),
                client_ip=request.client.host if request.client else None,
                module="http",
                event_type="http_request_error"
            )
            raise

        process_time = current_millis() - start_time
        self._record(request, response.status_code, start_time)

        log = logger.info if response.status_code >= 400 else logger.debug
        log(
            f"{request.method} {request.url.path} {response.status_code}",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            process_time_ms=round(process_time, 3),
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            module="http",
            event_type="http_request_complete"
        )

        # Add processing time header
        response.headers["X-Process-Time"] = str(round(process_time, 3))

        return response
