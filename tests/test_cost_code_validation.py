from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import json
import logging

import pytest

from pos_core.cost_code import decode_cost, default_cost_code_mapping, encode_cost
from pos_core.cost_code_validation import (
    CostCodeMappingError,
    apply_mapping_update,
    ensure_valid_mapping,
    validate_cost_code_mapping,
)
from pos_core.models_cost_code import CostCodeMapping

SAMPLE_AMOUNTS = list(range(0, 1200)) + [10000, 10001, 100000, 100100, 1000000, 2030405, 90000009]


def _mapping(letters: str = "NBQMFZVLJS", double: str = "SC", triple: str = "SCS") -> CostCodeMapping:
    return CostCodeMapping(
        digit_to_letter=dict(zip("1234567890", letters)),
        double_zero_code=double,
        triple_zero_code=triple,
    )


@pytest.mark.parametrize(
    "mapping",
    [
        _mapping(),
        _mapping("ABCDEFGHIO", "OO", "OOO"),
        _mapping("ABCDEFGHIJ", "X", "Y"),
        _mapping("ABCDEFGHIJ", "XY", "XYZ"),
        _mapping("ABCDEFGHIJ", "JX", "JXJ"),
    ],
)
def test_accepted_mappings_round_trip(mapping: CostCodeMapping) -> None:
    result = validate_cost_code_mapping(mapping)
    assert result.ok is True, result.issues
    for amount in SAMPLE_AMOUNTS:
        assert decode_cost(mapping, encode_cost(mapping, amount)) == Decimal(amount)


@pytest.mark.parametrize(
    ("mapping", "field"),
    [
        (CostCodeMapping(digit_to_letter={"1": "A"}), "digit_to_letter"),
        (
            CostCodeMapping(digit_to_letter={**dict(zip("1234567890", "ABCDEFGHIJ")), "x": "K"}),
            "digit_to_letter",
        ),
        (_mapping("ABCDEFGHI"), "digit_to_letter"),
        (_mapping("ABCDEFGHIA", "X", "Y"), "digit_to_letter"),
        (
            CostCodeMapping(
                digit_to_letter={**dict(zip("1234567890", "ABCDEFGHIJ")), "1": "AA"},
                double_zero_code="X",
                triple_zero_code="Y",
            ),
            "digit_to_letter.1",
        ),
        (_mapping("ABCDEFGHIJ", "", "Y"), "double_zero_code"),
        (_mapping("ABCDEFGHIJ", "X", ""), "triple_zero_code"),
        (_mapping("ABCDEFGHIJ", "X", "X"), "triple_zero_code"),
        (_mapping("ABCDEFGHIJ", "A", "Y"), "double_zero_code"),
        (_mapping("ABCDEFGHIJ", "AX", "Y"), "double_zero_code"),
        (_mapping("ABCDEFGHIJ", "X", "JA"), "triple_zero_code"),
        (_mapping("ABCDEFGHIJ", "XYZ", "XY"), "triple_zero_code"),
        (_mapping("ABCDEFGHIJ", "X", "XA"), "triple_zero_code"),
    ],
)
def test_rejected_mappings_report_field(mapping: CostCodeMapping, field: str) -> None:
    result = validate_cost_code_mapping(mapping)
    assert result.ok is False
    assert any(issue.field == field for issue in result.issues)


def test_ensure_valid_mapping_raises_with_issues() -> None:
    with pytest.raises(CostCodeMappingError) as excinfo:
        ensure_valid_mapping(_mapping("ABCDEFGHIJ", "A", "A"))
    assert excinfo.value.issues
    assert "double_zero_code" in str(excinfo.value) or "triple_zero_code" in str(excinfo.value)


def test_ensure_valid_mapping_returns_mapping() -> None:
    mapping = default_cost_code_mapping()
    assert ensure_valid_mapping(mapping) is mapping


def test_apply_mapping_update_stamps_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    now = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    caplog.set_level(logging.INFO, logger="pos_core")

    updated = apply_mapping_update(
        default_cost_code_mapping(),
        updated_by="admin-1",
        digit_to_letter=dict(zip("1234567890", "ABCDEFGHIO")),
        double_zero_code="OO",
        triple_zero_code="OOO",
        actor_role="admin",
        now=now,
    )

    assert updated.updated_at == now
    assert updated.updated_by == "admin-1"
    assert encode_cost(updated, 1000) == "AOOO"
    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["module"] == "cost_code"
    assert payload["action"] == "update_mapping"
    assert payload["outcome"] == "success"
    assert payload["unchanged"] is False


def test_apply_mapping_update_keeps_unspecified_codes() -> None:
    current = default_cost_code_mapping()
    updated = apply_mapping_update(current, updated_by="admin-1")
    assert updated.same_codes_as(current)
    assert updated.updated_by == "admin-1"
    assert updated.updated_at is not None


def test_apply_mapping_update_rejects_ambiguous(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="pos_core")
    current = default_cost_code_mapping()
    with pytest.raises(CostCodeMappingError):
        apply_mapping_update(current, updated_by="admin-1", double_zero_code="NS")
    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["outcome"] == "rejected"
    assert "double_zero_code" in payload["issues"]


def test_document_round_trip() -> None:
    mapping = _mapping("ABCDEFGHIO", "OO", "OOO").model_copy(
        update={"updated_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), "updated_by": "u-9"}
    )
    document = mapping.to_document()
    assert document["doubleZeroCode"] == "OO"
    assert document["updatedAt"] == "2024-01-02T03:04:05+00:00"
    assert CostCodeMapping.from_document(document) == mapping


def test_from_document_empty_map_falls_back_to_default() -> None:
    restored = CostCodeMapping.from_document({"digitToLetter": {}, "doubleZeroCode": "XX"})
    assert restored.same_codes_as(default_cost_code_mapping())
    assert CostCodeMapping.from_document(None).same_codes_as(default_cost_code_mapping())
