"""
Module: tests/test_api_models.py
Description: Test wire models for operation results and records
Test: pytest tests/test_api_models.py
"""

import pytest
from pydantic import ValidationError

from resolution_engine.api_models import (
    AdminParametersView,
    DisputePartiesView,
    OperationResponse,
    ResolutionView,
    resolution_payload,
)
from resolution_engine.errors import ResolutionError, Result
from resolution_engine.registries import DisputeParties
from resolution_engine.state_machine import AdminParameters, Resolution


@pytest.fixture
def resolution():
    return Resolution(
        mediator="ST1MEDIATOR",
        outcome="70% refund",
        rationale="Evidence shows damage",
        resolved_at=12,
        appealed=True,
        appeals_count=1,
        fee_paid=True
    )


class TestOperationResponse:
    """Test the {ok, value} envelope."""

    def test_success(self):
        response = OperationResponse.from_result(Result.success())

        assert response.model_dump() == {"ok": True, "value": True}

    def test_failure_carries_numeric_code(self):
        response = OperationResponse.from_result(Result.failure(ResolutionError.ALREADY_RESOLVED))

        assert response.model_dump() == {"ok": False, "value": 103}
        assert response.model_dump_json() == '{"ok":false,"value":103}'


class TestResolutionView:
    """Test resolution serialization."""

    def test_camel_case_wire_names(self, resolution):
        payload = resolution_payload(resolution)

        assert payload == {
            "mediator": "ST1MEDIATOR",
            "outcome": "70% refund",
            "rationale": "Evidence shows damage",
            "resolvedAt": 12,
            "appealed": True,
            "appealsCount": 1,
            "final": False,
            "feePaid": True,
        }

    def test_absent_resolution(self):
        assert resolution_payload(None) is None

    def test_parse_wire_payload_back_to_domain(self, resolution):
        payload = resolution_payload(resolution)

        assert ResolutionView.model_validate(payload).to_domain() == resolution

    def test_rejects_oversized_outcome(self):
        with pytest.raises(ValidationError):
            ResolutionView(mediator="M", outcome="x" * 257, rationale="r", resolved_at=0)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ResolutionView(mediator="M", outcome="o", rationale="r", resolved_at=0, appeal_reason="no")


class TestOtherViews:
    """Test dispute parties and parameter views."""

    def test_dispute_parties(self):
        view = DisputePartiesView.from_domain(DisputeParties("L", "T", "rent", 1000))

        assert view.model_dump(by_alias=True) == {
            "landlord": "L",
            "tenant": "T",
            "disputeType": "rent",
            "claimAmount": 1000,
        }

    def test_admin_parameters(self):
        view = AdminParametersView.from_domain(AdminParameters())

        assert view.model_dump(by_alias=True) == {
            "appealWindow": 43200,
            "maxAppeals": 1,
            "resolutionFee": 500,
        }
