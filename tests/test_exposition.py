"""Tests for Prometheus exposition rendering"""
from decimal import Decimal
from fractions import Fraction
import pytest

from metrics.collector import MetricsCollector
from metrics.exceptions import MetricsError, PrometheusModeNotEnabledError
from metrics.exposition import MetricsSnapshot, render_prometheus
from metrics.models import MetricKey, format_sample_value


class TestPrometheusMode:
    """Exposition precondition"""

    def test_rendering_requires_prometheus_mode(self, collector):
        collector.increment_counter("c")

        with pytest.raises(PrometheusModeNotEnabledError, match="Prometheus mode not enabled"):
            collector.get_prometheus_metrics()

    def test_precondition_error_is_a_metrics_error(self):
        assert issubclass(PrometheusModeNotEnabledError, MetricsError)

    def test_enable_is_idempotent_and_chainable(self, collector):
        assert collector.prometheus_enabled is False
        assert collector.enable_prometheus_mode() is collector
        assert collector.enable_prometheus_mode() is collector
        assert collector.prometheus_enabled is True


class TestRendering:
    """Exposition output"""

    def setup_method(self):
        self.collector = MetricsCollector().enable_prometheus_mode()

    def test_requests_by_method(self):
        for _ in range(3):
            self.collector.increment_counter("requests_total", 1, {"method": "GET"})
        self.collector.increment_counter("requests_total", 1, {"method": "POST"})

        assert self.collector.get_prometheus_metrics() == (
            "# TYPE requests_total counter\n"
            'requests_total{method="GET"} 3\n'
            'requests_total{method="POST"} 1\n'
        )

    def test_histogram_renders_sum_and_count(self):
        self.collector.observe_histogram("h", 1.5, {"route": "/"})
        self.collector.observe_histogram("h", 2.25, {"route": "/"})

        output = self.collector.get_prometheus_metrics()

        assert output == (
            "# TYPE h histogram\n"
            'h_sum{route="/"} 3.75\n'
            'h_count{route="/"} 2\n'
        )

    def test_unlabelled_metrics_omit_braces(self):
        self.collector.set_gauge("temperature", 21.5)

        assert self.collector.get_prometheus_metrics() == "# TYPE temperature gauge\ntemperature 21.5\n"

    def test_sections_are_ordered_by_type(self):
        self.collector.observe_histogram("latency", 4)
        self.collector.set_gauge("in_flight", 2)
        self.collector.increment_counter("hits")

        lines = self.collector.get_prometheus_metrics().splitlines()

        assert lines == [
            "# TYPE hits counter",
            "hits 1",
            "# TYPE in_flight gauge",
            "in_flight 2",
            "# TYPE latency histogram",
            "latency_sum 4",
            "latency_count 1",
        ]

    def test_discovery_order_is_stable(self):
        self.collector.increment_counter("b_total")
        self.collector.increment_counter("a_total")
        self.collector.increment_counter("b_total", 1, {"x": "1"})

        first = self.collector.get_prometheus_metrics()
        self.collector.increment_counter("a_total")
        second = self.collector.get_prometheus_metrics()

        assert first.splitlines()[0] == "# TYPE b_total counter"
        assert first.splitlines()[1:3] == ["b_total 1", 'b_total{x="1"} 1']
        assert [line for line in second.splitlines() if line.startswith("#")] == [
            line for line in first.splitlines() if line.startswith("#")
        ]

    def test_one_type_line_per_metric_name(self):
        self.collector.increment_counter("c", 1, {"k": "1"})
        self.collector.increment_counter("c", 1, {"k": "2"})
        self.collector.set_gauge("g", 1)
        self.collector.observe_histogram("h", 1)

        output = self.collector.get_prometheus_metrics()

        assert output.count("# TYPE ") == 3

    def test_labels_are_sorted_and_escaped(self):
        self.collector.increment_counter("c", 1, {"path": 'say "hi"\\', "b": "line\nbreak"})

        output = self.collector.get_prometheus_metrics()

        assert 'c{b="line\\nbreak",path="say \\"hi\\"\\\\"} 1' in output

    def test_empty_store_renders_empty_string(self):
        assert self.collector.get_prometheus_metrics() == ""


class TestFormatting:
    """Sample value formatting"""

    @pytest.mark.parametrize("value,expected", [
        (3, "3"),
        (3.0, "3"),
        (0.25, "0.25"),
        (-2.0, "-2"),
        (float("inf"), "+Inf"),
        (float("-inf"), "-Inf"),
        (float("nan"), "NaN"),
        (True, "1"),
        (Decimal("1.5"), "1.5"),
        (Decimal("4.000"), "4"),
        (Fraction(1, 2), "0.5"),
        (Fraction(6, 3), "2"),
    ])
    def test_format_sample_value(self, value, expected):
        assert format_sample_value(value) == expected

    def test_non_float_numbers_render_as_numbers(self):
        collector = MetricsCollector().enable_prometheus_mode()
        collector.set_gauge("ratio", Fraction(1, 4))
        collector.observe_histogram("amount", Decimal("1.5"))
        collector.observe_histogram("amount", Decimal("2.5"))

        assert collector.get_prometheus_metrics() == (
            "# TYPE ratio gauge\n"
            "ratio 0.25\n"
            "# TYPE amount histogram\n"
            "amount_sum 4\n"
            "amount_count 2\n"
        )

    def test_render_snapshot_directly(self):
        snapshot = MetricsSnapshot(
            counters=[(MetricKey.create("jobs_total", {"queue": "default"}), 4)],
            histograms=[(MetricKey.create("job_ms"), [10, 20, 30])],
        )

        assert render_prometheus(snapshot) == (
            "# TYPE jobs_total counter\n"
            'jobs_total{queue="default"} 4\n'
            "# TYPE job_ms histogram\n"
            "job_ms_sum 60\n"
            "job_ms_count 3\n"
        )
