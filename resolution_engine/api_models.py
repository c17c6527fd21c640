"""
Module: resolution_engine/api_models.py
Description: Pydantic models for the resolution contract's wire format

Field names on the wire are camelCase (resolvedAt, appealsCount, feePaid),
matching what existing callers already parse. Operation outcomes serialize
as {"ok": bool, "value": true | <error code>}.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from resolution_engine.errors import Result
from resolution_engine.registries import DisputeParties
from resolution_engine.state_machine import (
    OUTCOME_MAX_LENGTH,
    RATIONALE_MAX_LENGTH,
    AdminParameters,
    Resolution,
)


# ============================================================
# Base Models
# ============================================================

class BaseWireModel(BaseModel):
    """Base model with common configuration."""
    model_config = ConfigDict(
        populate_by_name=True,
        extra='forbid'
    )


# ============================================================
# Operation Results
# ============================================================

class OperationResponse(BaseWireModel):
    """Outcome of a contract operation."""
    ok: bool = Field(..., description="True when the operation took effect")
    value: Union[bool, int] = Field(..., description="True on success, numeric error code on failure")

    @classmethod
    def from_result(cls, result: Result) -> "OperationResponse":
        return cls(ok=result.ok, value=True if result.ok else int(result.value))


# ============================================================
# Records
# ============================================================

class ResolutionView(BaseWireModel):
    """Serialized resolution record."""
    mediator: str = Field(..., min_length=1)
    outcome: str = Field(..., min_length=1, max_length=OUTCOME_MAX_LENGTH)
    rationale: str = Field(..., min_length=1, max_length=RATIONALE_MAX_LENGTH)
    resolved_at: int = Field(..., ge=0, alias="resolvedAt")
    appealed: bool = False
    appeals_count: int = Field(default=0, ge=0, alias="appealsCount")
    final: bool = False
    fee_paid: bool = Field(default=False, alias="feePaid")

    @classmethod
    def from_domain(cls, resolution: Resolution) -> "ResolutionView":
        return cls(**resolution.to_dict())

    def to_domain(self) -> Resolution:
        return Resolution(**self.model_dump())


class DisputePartiesView(BaseWireModel):
    """Serialized dispute parties."""
    landlord: str
    tenant: str
    dispute_type: str = Field(..., alias="disputeType")
    claim_amount: int = Field(..., ge=0, alias="claimAmount")

    @classmethod
    def from_domain(cls, parties: DisputeParties) -> "DisputePartiesView":
        return cls(**parties.to_dict())


class AdminParametersView(BaseWireModel):
    """Serialized administrative parameters."""
    appeal_window: int = Field(..., alias="appealWindow")
    max_appeals: int = Field(..., alias="maxAppeals")
    resolution_fee: int = Field(..., alias="resolutionFee")

    @classmethod
    def from_domain(cls, params: AdminParameters) -> "AdminParametersView":
        return cls(**params.to_dict())


def resolution_payload(resolution: Optional[Resolution]) -> Optional[dict]:
    """Wire form of an optional resolution; absent stays None."""
    if resolution is None:
        return None
    return ResolutionView.from_domain(resolution).model_dump(by_alias=True)
