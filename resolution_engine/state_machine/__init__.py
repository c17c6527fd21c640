"""
Resolution State Machine for landlord/tenant disputes

Pure transitions: (record, caller, height, parameters, operation) -> (record or
rejection, fee transfer).

Test Command: pytest tests/test_state_machine.py -v --cov=resolution_engine/state_machine
"""

from .state_machine import (
    OUTCOME_MAX_LENGTH,
    RATIONALE_MAX_LENGTH,
    AdminParameters,
    CallContext,
    DisputeLookup,
    FeeTransfer,
    MediatorCheck,
    Resolution,
    Transition,
    appeal_resolution,
    finalize_resolution,
    pay_resolution_fee,
    propose_resolution,
    set_appeal_window,
    set_max_appeals,
    set_resolution_fee,
)

__all__ = [
    "OUTCOME_MAX_LENGTH",
    "RATIONALE_MAX_LENGTH",
    "AdminParameters",
    "CallContext",
    "DisputeLookup",
    "FeeTransfer",
    "MediatorCheck",
    "Resolution",
    "Transition",
    "appeal_resolution",
    "finalize_resolution",
    "pay_resolution_fee",
    "propose_resolution",
    "set_appeal_window",
    "set_max_appeals",
    "set_resolution_fee",
]
