"""Prometheus text exposition rendering"""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple, TypeVar
from .models import MetricKey, MetricType, format_sample_value


T = TypeVar("T")


@dataclass
class MetricsSnapshot:
    """Point-in-time copy of the collector mappings, in discovery order"""
    counters: List[Tuple[MetricKey, float]] = field(default_factory=list)
    gauges: List[Tuple[MetricKey, float]] = field(default_factory=list)
    histograms: List[Tuple[MetricKey, List[float]]] = field(default_factory=list)


def group_by_name(entries: Sequence[Tuple[MetricKey, T]]) -> Dict[str, List[Tuple[MetricKey, T]]]:
    """Group entries by metric name, preserving order"""
    grouped: Dict[str, List[Tuple[MetricKey, T]]] = {}
    for key, value in entries:
        if key.name not in grouped:
            grouped[key.name] = []
        grouped[key.name].append((key, value))
    return grouped


def render_prometheus(snapshot: MetricsSnapshot) -> str:
    """Render a snapshot in the Prometheus text exposition format.

    Counters come first, then gauges, then histograms. Identities sharing a
    metric name share a single TYPE declaration. Histograms are summarized as
    `_sum` and `_count` samples only; observations are never bucketed.
    """
    lines: List[str] = []

    for metric_type, entries in (
        (MetricType.COUNTER, snapshot.counters),
        (MetricType.GAUGE, snapshot.gauges),
    ):
        for metric_name, metric_list in group_by_name(entries).items():
            lines.append(f"# TYPE {metric_name} {metric_type.value}")
            for key, value in metric_list:
                lines.append(key.to_prometheus_line(value))

    for metric_name, metric_list in group_by_name(snapshot.histograms).items():
        lines.append(f"# TYPE {metric_name} {MetricType.HISTOGRAM.value}")
        for key, values in metric_list:
            labels = key.label_string()
            lines.append(f"{metric_name}_sum{labels} {format_sample_value(sum(values))}")
            lines.append(f"{metric_name}_count{labels} {len(values)}")

    if not lines:
        return ""
    lines.append("")  # Final newline
    return "\n".join(lines)
