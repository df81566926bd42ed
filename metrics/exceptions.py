"""Metrics errors"""


class MetricsError(Exception):
    """Base class for metrics collector errors"""


class PrometheusModeNotEnabledError(MetricsError):
    """Exposition was requested before Prometheus mode was enabled"""

    def __init__(self, message: str = "Prometheus mode not enabled"):
        super().__init__(message)
