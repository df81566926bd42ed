"""In-process metrics collector.

A single `MetricsCollector` is created at startup and passed by reference to
every component that records metrics. Components normally talk to it through
a `NamespacedMetrics` facade, which prefixes metric names with the
component's namespace:

    collector = MetricsCollector()
    http_metrics = collector.namespaced("http")
    http_metrics.increment_counter("requests_total", 1, {"method": "GET"})

    collector.enable_prometheus_mode()
    text = collector.get_prometheus_metrics()
"""
import threading
import time
from typing import Callable, Dict, List, Mapping, Optional
from .exceptions import PrometheusModeNotEnabledError
from .exposition import MetricsSnapshot, render_prometheus
from .models import MetricEvent, MetricKey, MetricType
from logging_config import get_logger


logger = get_logger(__name__)

EVENT_BUFFER_CAPACITY = 10_000
EVENT_BUFFER_TRIM_TO = 5_000

Labels = Optional[Mapping[str, str]]
MetricObserver = Callable[[MetricEvent], None]


def current_millis() -> float:
    """Wall-clock time in milliseconds, the unit used by `record_timing`"""
    return time.time() * 1000


class Timer:
    """Measures a duration and records it as a histogram observation"""

    def __init__(self, recorder, name: str, labels: Labels = None):
        self._recorder = recorder
        self.name = name
        self.labels = dict(labels or {})
        self.start_time = current_millis()

    def stop(self, labels: Labels = None) -> float:
        """Record the elapsed milliseconds and return them"""
        duration = current_millis() - self.start_time
        self._recorder.observe_histogram(self.name, duration, {**self.labels, **(labels or {})})
        return duration


class MetricsCollector:
    """Thread-safe store of counters, gauges and histogram observations"""

    def __init__(self):
        self._counters: Dict[MetricKey, float] = {}
        self._gauges: Dict[MetricKey, float] = {}
        self._histograms: Dict[MetricKey, List[float]] = {}
        self._buffer: List[MetricEvent] = []
        self._observers: List[MetricObserver] = []
        self._prometheus_mode = False
        self._lock = threading.Lock()

    def increment_counter(self, name: str, value: float = 1, labels: Labels = None) -> float:
        """Add `value` to a counter and return the accumulated total"""
        key = MetricKey.create(name, labels)
        with self._lock:
            new_value = self._counters.get(key, 0) + value
            self._counters[key] = new_value
            event = self._record_event(MetricType.COUNTER, name, new_value, labels)
        self._notify(event)
        return new_value

    def set_gauge(self, name: str, value: float, labels: Labels = None) -> float:
        """Overwrite a gauge and return the value set"""
        key = MetricKey.create(name, labels)
        with self._lock:
            self._gauges[key] = value
            event = self._record_event(MetricType.GAUGE, name, value, labels)
        self._notify(event)
        return value

    def observe_histogram(self, name: str, value: float, labels: Labels = None) -> List[float]:
        """Append an observation and return the updated sequence"""
        key = MetricKey.create(name, labels)
        with self._lock:
            observations = self._histograms.setdefault(key, [])
            observations.append(value)
            result = list(observations)
            event = self._record_event(MetricType.HISTOGRAM, name, value, labels)
        self._notify(event)
        return result

    def record_timing(self, name: str, start_time: float, labels: Labels = None) -> List[float]:
        """Observe the milliseconds elapsed since `start_time`"""
        duration = current_millis() - start_time
        return self.observe_histogram(name, duration, labels)

    def start_timer(self, name: str, labels: Labels = None) -> Timer:
        """Start a timer whose `stop()` records the elapsed time"""
        return Timer(self, name, labels)

    def enable_prometheus_mode(self) -> "MetricsCollector":
        """Allow `get_prometheus_metrics` to render the store"""
        if not self._prometheus_mode:
            self._prometheus_mode = True
            logger.debug("Prometheus exposition enabled", event_type="prometheus_mode_enabled")
        return self

    @property
    def prometheus_enabled(self) -> bool:
        return self._prometheus_mode

    def get_prometheus_metrics(self) -> str:
        """Render every stored metric in the text exposition format"""
        if not self._prometheus_mode:
            raise PrometheusModeNotEnabledError()
        return render_prometheus(self.snapshot())

    def snapshot(self) -> MetricsSnapshot:
        """Copy the three mappings, preserving discovery order"""
        with self._lock:
            return MetricsSnapshot(
                counters=list(self._counters.items()),
                gauges=list(self._gauges.items()),
                histograms=[(key, list(values)) for key, values in self._histograms.items()],
            )

    def get_all_metrics(self) -> Dict[str, Dict]:
        """Plain-dict view of all metrics, keyed by `name{labels}`"""
        with self._lock:
            return {
                "counters": {str(key): value for key, value in self._counters.items()},
                "gauges": {str(key): value for key, value in self._gauges.items()},
                "histograms": {str(key): list(values) for key, values in self._histograms.items()},
            }

    def reset_metrics(self) -> None:
        """Clear all metrics and the recent-events buffer"""
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._histograms.clear()
            self._buffer = []

    def recent_events(self) -> List[MetricEvent]:
        """Copy of the recent-events buffer, oldest first"""
        with self._lock:
            return list(self._buffer)

    def subscribe(self, callback: MetricObserver) -> Callable[[], None]:
        """Register an observer called synchronously after each update.

        Observers run in the updating thread after the lock is released. With
        concurrent updaters, delivery order across threads may differ from the
        order of `recent_events()`; events from a single thread arrive in order.

        Returns a function that removes the observer again.
        """
        with self._lock:
            self._observers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return unsubscribe

    def namespaced(self, namespace: str) -> "NamespacedMetrics":
        return NamespacedMetrics(self, namespace)

    def _record_event(self, metric_type: MetricType, name: str, value: float, labels: Labels) -> MetricEvent:
        # Caller holds the lock
        event = MetricEvent(
            metric_type=metric_type,
            name=name,
            value=value,
            labels=dict(labels or {}),
            timestamp=current_millis(),
        )
        self._buffer.append(event)
        if len(self._buffer) > EVENT_BUFFER_CAPACITY:
            self._buffer = self._buffer[-EVENT_BUFFER_TRIM_TO:]
        return event

    def _notify(self, event: MetricEvent) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            observer(event)


class NamespacedMetrics:
    """Prefixes metric names with `<namespace>_` before delegating"""

    def __init__(self, collector: MetricsCollector, namespace: str):
        self.collector = collector
        self.namespace = namespace

    def _name(self, metric: str) -> str:
        return f"{self.namespace}_{metric}"

    def increment_counter(self, metric: str, value: float = 1, labels: Labels = None) -> float:
        return self.collector.increment_counter(self._name(metric), value, labels)

    def set_gauge(self, metric: str, value: float, labels: Labels = None) -> float:
        return self.collector.set_gauge(self._name(metric), value, labels)

    def observe_histogram(self, metric: str, value: float, labels: Labels = None) -> List[float]:
        return self.collector.observe_histogram(self._name(metric), value, labels)

    def record_timing(self, metric: str, start_time: float, labels: Labels = None) -> List[float]:
        return self.collector.record_timing(self._name(metric), start_time, labels)

    def start_timer(self, metric: str, labels: Labels = None) -> Timer:
        return Timer(self, metric, labels)

    def get_all_metrics(self) -> Dict[str, Dict]:
        return self.collector.get_all_metrics()

    def enable_prometheus_mode(self) -> MetricsCollector:
        return self.collector.enable_prometheus_mode()

    def get_prometheus_metrics(self) -> str:
        return self.collector.get_prometheus_metrics()


def get_metrics_collector(collector: MetricsCollector, namespace: str) -> NamespacedMetrics:
    """Get a facade that namespaces metric names by component"""
    return NamespacedMetrics(collector, namespace)
