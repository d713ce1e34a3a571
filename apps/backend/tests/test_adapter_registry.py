from resolver.adapters import available_adapter_ids, build_default_adapters
from resolver.adapters.kicksdb import KicksDBAdapter
from resolver.adapters.sneaks import SneaksAdapter


def test_paid_source_first_when_key_configured(monkeypatch):
    monkeypatch.setenv("KICKSDB_API_KEY", "test_key")
    monkeypatch.delenv("SNEAKS_ENABLED", raising=False)
    monkeypatch.setenv("SNEAKS_API_URL", "http://sneaks.internal:4000")

    adapters = build_default_adapters()

    assert available_adapter_ids(adapters) == ["kicksdb", "sneaks"]
    assert isinstance(adapters[0], KicksDBAdapter)
    assert adapters[0].api_key == "test_key"
    assert isinstance(adapters[1], SneaksAdapter)
    assert adapters[1].base_url == "http://sneaks.internal:4000"


def test_kicksdb_not_registered_without_key(monkeypatch):
    monkeypatch.delenv("KICKSDB_API_KEY", raising=False)
    monkeypatch.delenv("SNEAKS_ENABLED", raising=False)
    monkeypatch.delenv("SNEAKS_API_URL", raising=False)

    adapters = build_default_adapters()

    assert available_adapter_ids(adapters) == ["sneaks"]
    assert adapters[0].base_url == "http://localhost:4000"


def test_sneaks_can_be_disabled(monkeypatch):
    monkeypatch.setenv("KICKSDB_API_KEY", "test_key")
    monkeypatch.setenv("SNEAKS_ENABLED", "false")

    assert available_adapter_ids(build_default_adapters()) == ["kicksdb"]
