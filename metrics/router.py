"""Prometheus scrape endpoint"""
from fastapi import APIRouter, Response
from .collector import MetricsCollector
from logging_config import get_logger, log_error


logger = get_logger(__name__)


def create_prometheus_router(collector: MetricsCollector, enable_exposition: bool = True) -> APIRouter:
    """Build a router serving the collector in Prometheus text format.

    Mount it with a prefix; the route itself lives at the prefix root.
    """
    router = APIRouter()
    if enable_exposition:
        collector.enable_prometheus_mode()

    @router.get("", response_class=Response)
    def get_metrics():
        """Serve metrics in Prometheus format"""
        try:
            content = collector.get_prometheus_metrics()
            return Response(content, media_type="text/plain")
        except Exception as e:
            log_error(logger, e, {"component": "prometheus_router"})
            return Response(
                f"Failed to generate metrics: {e}",
                status_code=500,
                media_type="text/plain",
            )

    return router
