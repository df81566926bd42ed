"""FastAPI server setup and routes"""
import time
from fastapi import FastAPI
from config import Config
from metrics.collector import MetricsCollector
from metrics.router import create_prometheus_router
from logging_config import get_logger, log_server_startup
from middleware.cors import CORSAllowlistMiddleware
from middleware.error_handler import ErrorHandlerMiddleware, register_error_handlers
from middleware.request_logging import RequestLoggingMiddleware
from .routes import create_api_router


logger = get_logger(__name__)


class ApplicationServer:
    """FastAPI server wiring middleware, API routes and the metrics endpoint"""

    def __init__(self, config: Config, collector: MetricsCollector):
        self.config = config
        self.collector = collector
        self.app = FastAPI(
            title=config.app_name,
            version="1.0.0",
            docs_url=None,  # Disable docs for security
            redoc_url=None,  # Disable redoc for security
            openapi_url=None  # Disable OpenAPI schema for security
        )

        # Setup middleware
        self._setup_middleware()

        # Setup routes
        self._setup_routes()

        # Fallback error handler (last)
        register_error_handlers(self.app)

        # Setup startup/shutdown events
        self._setup_events()

    def _setup_middleware(self):
        """Setup middleware"""
        # Add middleware in reverse order (last added is executed first)

        # Route errors become responses before CORS headers are applied
        self.app.add_middleware(ErrorHandlerMiddleware)

        # CORS
        self.app.add_middleware(
            CORSAllowlistMiddleware,
            allowlist=self.config.cors_allowlist
        )

        # Request logging middleware
        if self.config.enable_request_logging:
            self.app.add_middleware(
                RequestLoggingMiddleware,
                metrics=self.collector.namespaced("http")
            )

    def _setup_routes(self):
        """Mount the API router and the Prometheus scrape endpoint"""
        self.app.include_router(create_api_router(), prefix=self.config.api_prefix)
        self.app.include_router(
            create_prometheus_router(self.collector, enable_exposition=self.config.prometheus_enabled),
            prefix=self.config.metrics_path
        )

    def _setup_events(self):
        """Setup FastAPI startup/shutdown events"""

        @self.app.on_event("startup")
        async def startup_event():
            """Record start time and announce the server"""
            self.app.state.start_time = time.time()
            log_server_startup(logger, self.config)

        @self.app.on_event("shutdown")
        async def shutdown_event():
            """Log shutdown"""
            uptime = time.time() - getattr(self.app.state, "start_time", time.time())
            logger.info(
                "Shutting down server...",
                uptime_seconds=round(uptime, 1),
                event_type="server_shutdown"
            )

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
