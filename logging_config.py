"""Structured logging configuration for the service scaffold"""
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import TYPE_CHECKING, Any, Dict, Optional
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer
from config import Config

if TYPE_CHECKING:
    from metrics.collector import MetricsCollector


class LogMetricsProcessor:
    """structlog processor that counts emitted log events as metrics"""

    def __init__(self, collector: "MetricsCollector"):
        self.metrics = collector.namespaced("logger")
        self.total = 0
        self.by_level: Dict[str, int] = {}

    def __call__(self, logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        level = event_dict.get("level", method_name)
        module = str(event_dict.get("module") or event_dict.get("logger") or "unknown")

        self.total += 1
        self.by_level[level] = self.by_level.get(level, 0) + 1

        self.metrics.increment_counter("logs_total", 1, {"module": module, "level": level})
        if level in ("error", "critical"):
            self.metrics.increment_counter(
                "errors_total", 1,
                {"module": module, "error_type": str(event_dict.get("error_type", "unknown"))}
            )
        return event_dict

    def get_log_stats(self) -> Dict[str, Any]:
        """Log counts since startup"""
        return {"total": self.total, "by_level": dict(self.by_level)}


def setup_structured_logging(config: Config, collector: Optional["MetricsCollector"] = None) -> Optional[LogMetricsProcessor]:
    """Setup structured logging with JSON format for production and console for development.

    When a collector is given, every emitted log event is counted into it and
    the counting processor is returned.
    """

    # Ensure log directory exists
    config.log_dir.mkdir(parents=True, exist_ok=True)

    # Configure processors
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]

    log_metrics = None
    if collector is not None:
        log_metrics = LogMetricsProcessor(collector)
        processors.append(log_metrics)

    processors.extend([
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ])

    # Use JSON renderer for production, console for development
    if config.is_development():
        processors.append(ConsoleRenderer())
    else:
        processors.append(JSONRenderer())

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    level = getattr(logging, config.effective_log_level)

    # Create handlers
    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    # Daily rotating application log
    app_handler = TimedRotatingFileHandler(
        str(config.log_dir / "app.log"),
        when="midnight",
        backupCount=config.log_retention_days,
        encoding="utf-8",
    )
    app_handler.setLevel(level)
    handlers.append(app_handler)

    # Daily rotating error log
    error_handler = TimedRotatingFileHandler(
        str(config.log_dir / "error.log"),
        when="midnight",
        backupCount=config.log_retention_days,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    handlers.append(error_handler)

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )

    # Set specific logger levels to reduce noise
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('fastapi').setLevel(logging.WARNING)

    return log_metrics


def get_logger(name: str, module: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance, optionally bound to a module name"""
    logger = structlog.get_logger(name)
    if module:
        logger = logger.bind(module=module)
    return logger


def log_server_startup(logger: structlog.stdlib.BoundLogger, config: Config) -> None:
    """Log server startup with configuration details"""
    logger.info(
        f"Server running on http://{config.host}:{config.port}",
        app_name=config.app_name,
        environment=config.environment,
        port=config.port,
        log_level=config.effective_log_level,
        prometheus_enabled=config.prometheus_enabled,
        metrics_path=config.metrics_path,
        event_type="server_startup"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=error
    )
