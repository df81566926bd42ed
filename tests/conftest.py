"""Shared test fixtures"""
import pytest

from config import Config
from metrics.collector import MetricsCollector


@pytest.fixture
def collector():
    """Fresh metrics collector"""
    return MetricsCollector()


@pytest.fixture
def config(tmp_path):
    """Configuration writing logs to a temporary directory"""
    return Config(_env_file=None, log_dir=tmp_path / "logs")
