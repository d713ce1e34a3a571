import os
import sys
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add parent directory to path to allow importing resolver and main
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from resolver.adapters.base import SourceAdapter
from resolver.cache.memory import InMemoryCacheStore
from resolver.models import SourceResult
from resolver.service import ResolutionService

T0 = 1_700_000_000_000


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class StubAdapter(SourceAdapter):
    """Returns a canned result (or raises) and records every lookup."""

    def __init__(self, adapter_id: str, result: Optional[SourceResult] = None, error: Optional[Exception] = None):
        self.adapter_id = adapter_id
        self.result = result
        self.error = error
        self.calls: List[str] = []

    async def lookup(self, sku: str) -> Optional[SourceResult]:
        self.calls.append(sku)
        if self.error is not None:
            raise self.error
        return self.result


def panda_result(source_name: str = "kicksdb") -> SourceResult:
    return SourceResult(
        name="Nike Dunk Low Retro White Black Panda",
        returned_id="DD1391-100",
        source_name=source_name,
        exact_match=True,
    )


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock()


@pytest.fixture(name="memory_cache")
def memory_cache_fixture(clock):
    return InMemoryCacheStore(clock=clock)


@pytest.fixture(name="make_adapter")
def make_adapter_fixture():
    return StubAdapter


@pytest.fixture(name="panda")
def panda_fixture():
    return panda_result()


@pytest.fixture(name="service")
def service_fixture(memory_cache, panda):
    adapters = [StubAdapter("kicksdb", result=panda), StubAdapter("sneaks")]
    return ResolutionService(memory_cache, adapters, adapter_timeout_seconds=1.0)


@pytest_asyncio.fixture(name="client")
async def client_fixture(service):
    from main import app

    app.state.resolution_service = service
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.state.resolution_service = None
