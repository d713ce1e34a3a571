import asyncio

import pytest

from exceptions import SourceAdapterError
from resolver.adapters.base import SourceAdapter, pick_best_candidate
from resolver.executors import run_adapter_with_status
from resolver.models import SourceResult


class SlowAdapter(SourceAdapter):
    adapter_id = "slow"

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False

    async def lookup(self, sku: str):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return SourceResult(returned_id=sku, source_name=self.adapter_id)


@pytest.mark.asyncio
async def test_run_adapter_with_status_ok(make_adapter, panda):
    adapter = make_adapter("kicksdb", result=panda)
    result, status = await run_adapter_with_status(adapter, "DD1391-100", timeout_seconds=1.0)

    assert result == panda
    assert status.adapter_id == "kicksdb"
    assert status.status == "ok"
    assert status.latency_ms >= 0
    assert adapter.calls == ["DD1391-100"]


@pytest.mark.asyncio
async def test_run_adapter_with_status_empty(make_adapter):
    result, status = await run_adapter_with_status(make_adapter("sneaks"), "DD1391-100", timeout_seconds=1.0)

    assert result is None
    assert status.status == "empty"


@pytest.mark.asyncio
async def test_run_adapter_with_status_timeout_cancels_call():
    adapter = SlowAdapter(delay=0.5)
    result, status = await run_adapter_with_status(adapter, "DD1391-100", timeout_seconds=0.01)

    assert result is None
    assert status.status == "timeout"
    assert status.message == "Lookup timed out"
    assert adapter.cancelled is True


@pytest.mark.asyncio
async def test_run_adapter_with_status_error_is_absorbed(make_adapter):
    adapter = make_adapter(
        "kicksdb",
        error=SourceAdapterError("Authorization: Bearer secret123 rejected", adapter="kicksdb"),
    )
    result, status = await run_adapter_with_status(adapter, "DD1391-100", timeout_seconds=1.0)

    assert result is None
    assert status.status == "error"
    assert status.message.startswith("Lookup failed:")
    assert "secret123" not in status.message


def test_pick_best_candidate_exact_match_case_insensitive():
    items = [{"sku": "A-1"}, {"sku": "dd1391-100"}, {"sku": "DD1391-100"}]
    item, exact = pick_best_candidate(items, "DD1391-100", "sku")
    assert item is items[1]
    assert exact is True


def test_pick_best_candidate_first_in_native_order():
    items = ["junk", {"sku": "A-1"}, {"sku": "B-2"}]
    item, exact = pick_best_candidate(items, "DD1391-100", "sku")
    assert item == {"sku": "A-1"}
    assert exact is False

    assert pick_best_candidate([], "DD1391-100", "sku") == (None, False)
