"""Metric data models"""
import math
import numbers
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple
from enum import Enum


class MetricType(Enum):
    """Prometheus metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


def escape_label_value(value: str) -> str:
    """Escape a label value for the exposition format"""
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def format_sample_value(value: float) -> str:
    """Format a sample value the way scrapers expect it.

    Integers render as-is; every other real number (Decimal and Fraction
    included) is converted to float first.
    """
    if isinstance(value, numbers.Integral):
        return str(int(value))
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class MetricKey:
    """Identity of a single counter, gauge or histogram slot.

    Labels are stored as a sorted tuple of pairs so that two mappings holding
    the same pairs address the same slot regardless of insertion order.
    """
    name: str
    labels: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def create(cls, name: str, labels: Optional[Mapping[str, str]] = None) -> "MetricKey":
        """Build a key from a metric name and an arbitrary label mapping"""
        if not labels:
            return cls(name)
        return cls(name, tuple(sorted((str(k), str(v)) for k, v in labels.items())))

    def label_string(self) -> str:
        """Render labels as `{k="v",...}`, or an empty string when unlabelled"""
        if not self.labels:
            return ""
        label_pairs = [f'{k}="{escape_label_value(v)}"' for k, v in self.labels]
        return "{" + ",".join(label_pairs) + "}"

    def to_prometheus_line(self, value: float, suffix: str = "") -> str:
        """Convert to a single exposition sample line"""
        return f"{self.name}{suffix}{self.label_string()} {format_sample_value(value)}"

    def __str__(self) -> str:
        return f"{self.name}{self.label_string()}"


@dataclass
class MetricEvent:
    """Record emitted every time a metric is updated"""
    metric_type: MetricType
    name: str
    value: float
    labels: Dict[str, str] = field(default_factory=dict)
    timestamp: float = 0.0

    def __post_init__(self):
        # Ensure labels is never None
        if self.labels is None:
            self.labels = {}
