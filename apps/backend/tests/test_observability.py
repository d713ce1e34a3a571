import logging

import pytest

from observability.health import run_health_checks
from observability.logging import SensitiveDataFilter, correlation_id_context, get_correlation_id
from observability.middleware import is_health_check, sanitize_path
from resolver.metrics import track_resolution
from resolver.models import AdapterStatusSnapshot
from utils.security import redact_secrets_from_text, redact_sensitive


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/resolve/DD1391-100", "/resolve/{sku}"),
        ("/resolve", "/resolve"),
        ("/scan/text", "/scan/text"),
        ("/items/123", "/items/{id}"),
    ],
)
def test_sanitize_path(path, expected):
    assert sanitize_path(path) == expected


def test_health_and_metrics_paths_are_quiet():
    assert is_health_check("/health/ready")
    assert is_health_check("/metrics")
    assert not is_health_check("/resolve")


def test_correlation_id_context_resets():
    assert get_correlation_id() is None
    with correlation_id_context("req-abc") as req_id:
        assert req_id == "req-abc"
        assert get_correlation_id() == "req-abc"
    assert get_correlation_id() is None


def test_sensitive_data_filter_redacts_message_and_extras():
    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "calling %s with Bearer abc123", ("kicksdb",), None
    )
    record.api_key = "abc123"

    assert SensitiveDataFilter().filter(record) is True
    assert "abc123" not in record.getMessage()
    assert "kicksdb" in record.getMessage()
    assert record.api_key == "[REDACTED]"


def test_redaction_helpers():
    assert redact_secrets_from_text("GET /products?api_key=abc&query=x") == "GET /products?api_key=[REDACTED]&query=x"
    assert redact_secrets_from_text("Authorization: Bearer abc.def") == "Authorization: Bearer [REDACTED]"
    assert redact_sensitive({"Authorization": "Bearer x", "data": [{"token": "t", "sku": "A"}]}) == {
        "Authorization": "[REDACTED]",
        "data": [{"token": "[REDACTED]", "sku": "A"}],
    }


def test_track_resolution_logs_one_record(caplog):
    caplog.set_level(logging.INFO, logger="resolver.metrics")

    with track_resolution("DD1391-100") as metrics:
        metrics.normalized = "DD1391-100"
        metrics.outcome = "no_match"
        metrics.record_adapter(AdapterStatusSnapshot(adapter_id="kicksdb", status="timeout", latency_ms=8000))

    records = [r for r in caplog.records if r.name == "resolver.metrics"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert records[0].outcome == "no_match"
    assert records[0].adapters == [{"id": "kicksdb", "status": "timeout", "latency_ms": 8000}]


def test_track_resolution_marks_escaped_exceptions(caplog):
    caplog.set_level(logging.INFO, logger="resolver.metrics")

    with pytest.raises(RuntimeError):
        with track_resolution("DD1391-100"):
            raise RuntimeError("boom")

    assert caplog.records[-1].outcome == "error"
    assert caplog.records[-1].levelno == logging.ERROR


@pytest.mark.asyncio
async def test_resolution_log_lists_every_adapter(service, caplog):
    caplog.set_level(logging.INFO, logger="resolver.metrics")

    await service.resolve("DD1391-100")

    record = [r for r in caplog.records if r.name == "resolver.metrics"][-1]
    assert record.outcome == "source_hit"
    assert [a["id"] for a in record.adapters] == ["kicksdb", "sneaks"]
    assert [a["status"] for a in record.adapters] == ["ok", "skipped"]


@pytest.mark.asyncio
async def test_health_checks_roll_up(memory_cache, make_adapter):
    report = await run_health_checks(memory_cache, [make_adapter("sneaks")])
    assert report["status"] == "healthy"
    assert report["checks"]["adapters"]["details"] == {"chain": ["sneaks"]}

    report = await run_health_checks(memory_cache, [])
    assert report["status"] == "degraded"
    assert report["checks"]["adapters"]["error"] == "No source adapters configured"


@pytest.mark.asyncio
async def test_health_checks_fail_when_cache_errors(memory_cache, make_adapter):
    async def broken_stats():
        raise RuntimeError("database is locked")

    memory_cache.stats = broken_stats

    report = await run_health_checks(memory_cache, [make_adapter("sneaks")])

    assert report["status"] == "unhealthy"
    assert report["checks"]["cache"]["status"] == "error"
    assert "database is locked" in report["checks"]["cache"]["error"]
