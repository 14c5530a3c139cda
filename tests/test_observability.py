"""Tests for connector logging and metrics."""

import json
import logging

import pytest

from config import ConnectorConfig
from genealogy import GenealogistStatistics
from observability import (
    ColoredFormatter,
    JSONFormatter,
    get_genealogist_summary,
    get_metrics_summary,
    log_performance,
    record_genealogist_metrics,
    setup_logging,
    setup_logging_from_config,
    split_trace
)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def make_record(message, level=logging.INFO, **extra):
    record = logging.LogRecord("genealogy.batch", level, __file__, 42, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Test the log formatters."""

    def test_json_formatter(self):
        formatter = JSONFormatter(service_name="test-connector")
        entry = json.loads(formatter.format(make_record("DESCENDANTS: Checking", batch=7)))

        assert entry["message"] == "Checking"
        assert entry["trace"] == "DESCENDANTS"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "genealogy.batch"
        assert entry["service"] == "test-connector"
        assert entry["batch"] == 7

    def test_json_formatter_without_trace(self):
        entry = json.loads(JSONFormatter().format(make_record("Seeded 5 nodes")))
        assert entry["message"] == "Seeded 5 nodes"
        assert "trace" not in entry
        assert entry["service"] == "dtree-connector"

    def test_split_trace(self):
        assert split_trace("CACHE: Evicting 10 entries") == ("CACHE", "Evicting 10 entries")
        assert split_trace("DESCENDANTS: Node 5 is included") == ("DESCENDANTS", "Node 5 is included")
        assert split_trace("Other: message") == (None, "Other: message")
        assert split_trace("no prefix") == (None, "no prefix")

    def test_colored_formatter(self):
        plain = ColoredFormatter(use_colors=False).format(make_record("hello", logging.WARNING))
        assert "| WARNING  | genealogy.batch | hello" in plain
        assert "\033[" not in plain

        colored = ColoredFormatter(use_colors=True).format(make_record("hello", logging.WARNING))
        assert colored.startswith(ColoredFormatter.COLORS["WARNING"])


class TestSetupLogging:
    """Test root logger configuration."""

    def test_level_and_handler(self, restore_root_logger):
        setup_logging(level="DEBUG", use_colors=False)
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, ColoredFormatter)

    def test_json_and_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "connector.log"
        setup_logging(level="INFO", use_json=True, log_file=str(log_file))

        assert len(restore_root_logger.handlers) == 2
        assert all(isinstance(h.formatter, JSONFormatter) for h in restore_root_logger.handlers)
        assert log_file.parent.exists()
        for handler in restore_root_logger.handlers:
            handler.close()

    def test_from_connector_config(self, restore_root_logger, tmp_path):
        config_file = tmp_path / "connector.yaml"
        config_file.write_text("logging:\n  level: WARNING\n  format: json\n")

        setup_logging_from_config(ConnectorConfig(str(config_file)))

        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)


class TestLogPerformance:
    """Test the slow call decorator."""

    def test_slow_call_is_logged(self, caplog):
        @log_performance(logger_name="tests.slow", threshold_ms=-1)
        def work():
            return 42

        with caplog.at_level(logging.WARNING, logger="tests.slow"):
            assert work() == 42
        assert any("Slow function execution: work" in r.getMessage() for r in caplog.records)

    def test_failure_is_logged_and_raised(self, caplog):
        @log_performance(logger_name="tests.slow")
        def fail():
            raise ValueError("boom")

        with caplog.at_level(logging.ERROR, logger="tests.slow"):
            with pytest.raises(ValueError):
                fail()
        assert any("Function failed: fail" in r.getMessage() for r in caplog.records)


class TestGenealogistMetrics:
    """Test the Prometheus genealogist metrics."""

    def test_record(self):
        name = "metrics-test"
        before = get_genealogist_summary(name)
        statistics = GenealogistStatistics(query_count=3, orphan_count=1, cache_size=17)

        record_genealogist_metrics(name, statistics, candidates=10, included=4, duration=0.02)

        after = get_genealogist_summary(name)
        assert after["resolve_total"] == before["resolve_total"] + 1
        assert after["queries_total"] == before["queries_total"] + 3
        assert after["orphans_total"] == before["orphans_total"] + 1
        assert after["included_total"] == before["included_total"] + 4
        assert after["excluded_total"] == before["excluded_total"] + 6
        assert after["cache_size"] == 17

    def test_summary_text(self):
        record_genealogist_metrics(
            "summary-test", GenealogistStatistics(), candidates=1, included=1, duration=0.001
        )
        summary = get_metrics_summary()
        assert 'dtree_genealogist_resolve_total{genealogist="summary-test"}' in summary
        assert "dtree_genealogist_resolve_duration_seconds_bucket" in summary
