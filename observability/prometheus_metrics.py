"""Prometheus metrics for the DTree connector."""

import logging
from typing import Any, Dict

from prometheus_client import Counter, Histogram, Gauge, generate_latest
from prometheus_client.core import CollectorRegistry

from genealogy.statistics import GenealogistStatistics

logger = logging.getLogger(__name__)

# Create custom registry for connector metrics
dtree_registry = CollectorRegistry()

# Genealogist metrics
resolve_count = Counter(
    'dtree_genealogist_resolve_total',
    'Total number of candidate batches resolved',
    ['genealogist'],
    registry=dtree_registry
)

resolve_duration = Histogram(
    'dtree_genealogist_resolve_duration_seconds',
    'Candidate batch resolution duration in seconds',
    ['genealogist'],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=dtree_registry
)

candidate_count = Counter(
    'dtree_genealogist_candidates_total',
    'Total number of candidates decided',
    ['genealogist', 'decision'],
    registry=dtree_registry
)

query_count = Counter(
    'dtree_genealogist_queries_total',
    'Total number of parent lookups against the backing store',
    ['genealogist'],
    registry=dtree_registry
)

orphan_count = Counter(
    'dtree_genealogist_orphans_total',
    'Total number of candidates with a missing ancestor',
    ['genealogist'],
    registry=dtree_registry
)

cache_size = Gauge(
    'dtree_genealogist_cache_size',
    'Number of entries in the decision cache',
    ['genealogist'],
    registry=dtree_registry
)


def record_genealogist_metrics(genealogist: str, statistics: GenealogistStatistics,
                               candidates: int, included: int, duration: float) -> None:
    """Record the metrics for one resolved batch.

    Args:
        genealogist: The genealogist implementation name
        statistics: The counts accumulated by this batch, see
            :meth:`GenealogistStatistics.since`
        candidates: The number of candidates in the batch
        included: The number of candidates included
        duration: Resolution time in seconds
    """
    resolve_count.labels(genealogist=genealogist).inc()
    resolve_duration.labels(genealogist=genealogist).observe(duration)

    candidate_count.labels(genealogist=genealogist, decision="included").inc(included)
    candidate_count.labels(genealogist=genealogist, decision="excluded").inc(candidates - included)

    query_count.labels(genealogist=genealogist).inc(statistics.query_count)
    orphan_count.labels(genealogist=genealogist).inc(statistics.orphan_count)
    cache_size.labels(genealogist=genealogist).set(statistics.cache_size)


def get_sample_value(name: str, labels: Dict[str, str]) -> float:
    """Get the current value of a sample, or 0.0 if it was never recorded."""
    value = dtree_registry.get_sample_value(name, labels)
    return value if value is not None else 0.0


def get_metrics_summary() -> str:
    """Render the connector metrics in the Prometheus text format."""
    return generate_latest(dtree_registry).decode('utf-8')


def get_genealogist_summary(genealogist: str) -> Dict[str, Any]:
    """Get a summary of the metrics recorded for one genealogist."""
    labels = {'genealogist': genealogist}
    return {
        "resolve_total": get_sample_value('dtree_genealogist_resolve_total', labels),
        "queries_total": get_sample_value('dtree_genealogist_queries_total', labels),
        "orphans_total": get_sample_value('dtree_genealogist_orphans_total', labels),
        "cache_size": get_sample_value('dtree_genealogist_cache_size', labels),
        "included_total": get_sample_value(
            'dtree_genealogist_candidates_total', {**labels, 'decision': 'included'}
        ),
        "excluded_total": get_sample_value(
            'dtree_genealogist_candidates_total', {**labels, 'decision': 'excluded'}
        ),
    }
