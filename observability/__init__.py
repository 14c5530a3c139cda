"""Observability package for the DTree connector."""

from .logging import (
    setup_logging,
    setup_logging_from_config,
    split_trace,
    log_performance,
    JSONFormatter,
    ColoredFormatter
)
from .prometheus_metrics import (
    record_genealogist_metrics,
    get_metrics_summary,
    get_genealogist_summary,
    get_sample_value,
    dtree_registry
)

__all__ = [
    'setup_logging',
    'setup_logging_from_config',
    'split_trace',
    'log_performance',
    'JSONFormatter',
    'ColoredFormatter',
    'record_genealogist_metrics',
    'get_metrics_summary',
    'get_genealogist_summary',
    'get_sample_value',
    'dtree_registry'
]
