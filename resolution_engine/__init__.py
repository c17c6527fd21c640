"""
Module: resolution_engine/__init__.py
Description: Landlord/tenant resolution engine - mediator proposals, fees, appeals, finalization
"""

from .errors import ResolutionError, Result, TransferError
from .registries import DisputeParties, DisputeRegistry, MediatorRegistry
from .state_machine import AdminParameters, CallContext, Resolution
from .ledger import FeeLedger
from .audit_anchor import AuditTrail, ResolutionEvent
from .contract import ResolutionContract

__all__ = [
    "ResolutionError",
    "Result",
    "TransferError",
    "DisputeParties",
    "DisputeRegistry",
    "MediatorRegistry",
    "AdminParameters",
    "CallContext",
    "Resolution",
    "FeeLedger",
    "AuditTrail",
    "ResolutionEvent",
    "ResolutionContract",
]
