"""In-process metrics collection and Prometheus exposition"""
from .collector import MetricsCollector, NamespacedMetrics, Timer, current_millis, get_metrics_collector
from .exceptions import MetricsError, PrometheusModeNotEnabledError
from .models import MetricEvent, MetricKey, MetricType

__all__ = [
    'MetricsCollector',
    'NamespacedMetrics',
    'Timer',
    'current_millis',
    'get_metrics_collector',
    'MetricsError',
    'PrometheusModeNotEnabledError',
    'MetricEvent',
    'MetricKey',
    'MetricType',
]
