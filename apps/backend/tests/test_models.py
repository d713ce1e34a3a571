from exceptions import CacheStoreError, ResolverError, SourceAdapterError, ValidationError
from resolver.models import (
    AdapterStatusSnapshot,
    Classification,
    NormalizedRecord,
    ResolutionResponse,
    ScanResponse,
)


def test_failure_payload_omits_success_only_fields():
    response = ResolutionResponse(
        success=False,
        input="ZZ-0000-000",
        classification=Classification(normalized="ZZ-0000-000"),
        timing_ms=12,
        error="No match found",
        adapter_statuses=[AdapterStatusSnapshot(adapter_id="sneaks", status="empty")],
    )

    payload = response.to_payload()

    assert payload == {
        "success": False,
        "input": "ZZ-0000-000",
        "classification": {"brand": "Unknown", "confidence": 0.0, "normalized": "ZZ-0000-000"},
        "timing_ms": 12,
        "error": "No match found",
    }


def test_success_payload_keeps_resolved_record():
    response = ScanResponse(
        success=True,
        input="DD1391-100",
        resolved=NormalizedRecord(brand="Nike", model="Dunk Low"),
        confidence=0.98,
        source="kicksdb",
        sku="DD1391-100",
        us_size="10",
    )

    payload = response.to_payload()

    assert payload["resolved"] == {"brand": "Nike", "model": "Dunk Low", "category": "sneakers"}
    assert payload["us_size"] == "10"
    assert "error" not in payload
    assert "step_failed" not in payload


def test_exception_hierarchy():
    assert ValidationError("bad").status_code == 400
    assert CacheStoreError("down").status_code == 500

    error = SourceAdapterError("KicksDB returned 503", adapter="kicksdb")
    assert isinstance(error, ResolverError)
    assert error.status_code == 502
    assert error.to_dict() == {
        "error": "SourceAdapterError",
        "message": "KicksDB returned 503",
        "detail": {"adapter": "kicksdb", "service": "source_adapter"},
    }
