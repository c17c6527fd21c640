"""
Module: resolution_engine/contract.py
Description: Resolution contract - stateful facade over the pure state machine

Holds the per-dispute resolution records and the live administrative
parameters, evaluates each operation with the state machine, executes the
associated fee transfer, and only then commits the new record. A rejected
operation or a failed transfer leaves every record untouched.

Operations are serialized; the caller supplies the caller identity and the
current ledger height on every call.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from resolution_engine import state_machine as sm
from resolution_engine.audit_anchor import (
    FEE_PAID,
    PARAMETER_UPDATED,
    RESOLUTION_APPEALED,
    RESOLUTION_FINALIZED,
    RESOLUTION_PROPOSED,
    AuditTrail,
    ResolutionEvent,
)
from resolution_engine.errors import Result
from resolution_engine.ledger import FeeLedger
from resolution_engine.registries import DisputeParties
from resolution_engine.state_machine import (
    AdminParameters,
    CallContext,
    DisputeLookup,
    MediatorCheck,
    Resolution,
    Transition,
)

logger = logging.getLogger("resolution.contract")


class ResolutionContract:
    """On-ledger authority for mediator resolutions, fees, appeals and finalization."""

    def __init__(
        self,
        disputes: DisputeLookup,
        mediators: MediatorCheck,
        ledger: FeeLedger,
        admin: str,
        fee_recipient: str,
        parameters: Optional[AdminParameters] = None,
        audit: Optional[AuditTrail] = None
    ):
        self.disputes = disputes
        self.mediators = mediators
        self.ledger = ledger
        self.admin = admin
        self.fee_recipient = fee_recipient
        self.parameters = parameters or AdminParameters()
        self.audit = audit or AuditTrail()
        self.resolutions: Dict[int, Resolution] = {}

        logger.info(
            f"ResolutionContract initialized (admin: {admin}, "
            f"window: {self.parameters.appeal_window}, "
            f"max appeals: {self.parameters.max_appeals}, "
            f"fee: {self.parameters.resolution_fee})"
        )

    @classmethod
    def from_config(
        cls,
        cfg,
        disputes: DisputeLookup,
        mediators: MediatorCheck,
        ledger: FeeLedger
    ) -> "ResolutionContract":
        return cls(
            disputes=disputes,
            mediators=mediators,
            ledger=ledger,
            admin=cfg.ADMIN_IDENTITY,
            fee_recipient=cfg.FEE_RECIPIENT,
            parameters=AdminParameters.from_config(cfg),
        )

    # ------------------------------------------------------------------
    # Resolution lifecycle
    # ------------------------------------------------------------------

    def propose_resolution(
        self,
        dispute_id: int,
        outcome: str,
        rationale: str,
        *,
        caller: str,
        height: int
    ) -> Result:
        ctx = CallContext(caller, height)
        transition = sm.propose_resolution(
            self.resolutions.get(dispute_id),
            ctx,
            self.disputes,
            self.mediators,
            dispute_id,
            outcome,
            rationale,
        )
        return self._commit(
            "propose_resolution", dispute_id, ctx, transition,
            RESOLUTION_PROPOSED, {"outcome": outcome},
        )

    def pay_resolution_fee(self, dispute_id: int, *, caller: str, height: int) -> Result:
        ctx = CallContext(caller, height)
        transition = sm.pay_resolution_fee(
            self.resolutions.get(dispute_id),
            ctx,
            self.parameters,
            self.mediators,
            self.fee_recipient,
            dispute_id,
        )
        return self._commit(
            "pay_resolution_fee", dispute_id, ctx, transition,
            FEE_PAID, {"amount": self.parameters.resolution_fee},
        )

    def finalize_resolution(self, dispute_id: int, *, caller: str, height: int) -> Result:
        ctx = CallContext(caller, height)
        transition = sm.finalize_resolution(
            self.resolutions.get(dispute_id),
            ctx,
            self.parameters,
        )
        return self._commit(
            "finalize_resolution", dispute_id, ctx, transition, RESOLUTION_FINALIZED, {},
        )

    def appeal_resolution(
        self,
        dispute_id: int,
        appeal_reason: str,
        *,
        caller: str,
        height: int
    ) -> Result:
        ctx = CallContext(caller, height)
        transition = sm.appeal_resolution(
            self.resolutions.get(dispute_id),
            ctx,
            self.parameters,
            self.disputes,
            self.fee_recipient,
            dispute_id,
        )
        result = self._commit(
            "appeal_resolution", dispute_id, ctx, transition,
            RESOLUTION_APPEALED,
            {"appeal_reason": appeal_reason, "amount": self.parameters.resolution_fee},
        )
        if result.ok:
            logger.info(f"Appeal reason for dispute {dispute_id}: {appeal_reason}")
        return result

    def _commit(
        self,
        operation: str,
        dispute_id: int,
        ctx: CallContext,
        transition: Transition,
        event_type: str,
        payload: Dict[str, Any]
    ) -> Result:
        """Execute the transition's transfer, then store the record and audit event."""
        if not transition.ok:
            logger.warning(
                f"{operation} rejected for dispute {dispute_id} "
                f"(caller: {ctx.caller}, height: {ctx.height}): {transition.result.error.name}"
            )
            return transition.result

        if transition.transfer is not None:
            transfer = transition.transfer
            transferred = self.ledger.transfer(
                transfer.amount,
                transfer.sender,
                transfer.recipient,
                memo=f"{operation}:{dispute_id}",
            )
            if not transferred.ok:
                logger.warning(
                    f"{operation} aborted for dispute {dispute_id}: "
                    f"transfer failed ({transferred.error.name})"
                )
                return transferred

        self.resolutions[dispute_id] = transition.resolution
        self.audit.record(
            ResolutionEvent(
                event_type=event_type,
                actor=ctx.caller,
                height=ctx.height,
                dispute_id=dispute_id,
                payload=payload,
            )
        )

        logger.info(f"{operation} accepted for dispute {dispute_id} (caller: {ctx.caller}, height: {ctx.height})")
        return transition.result

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def set_appeal_window(self, new_window: int, *, caller: str, height: int = 0) -> Result:
        return self._update_parameter(sm.set_appeal_window, "appeal_window", new_window, caller, height)

    def set_max_appeals(self, new_max: int, *, caller: str, height: int = 0) -> Result:
        return self._update_parameter(sm.set_max_appeals, "max_appeals", new_max, caller, height)

    def set_resolution_fee(self, new_fee: int, *, caller: str, height: int = 0) -> Result:
        return self._update_parameter(sm.set_resolution_fee, "resolution_fee", new_fee, caller, height)

    def _update_parameter(self, setter, name: str, value: int, caller: str, height: int) -> Result:
        ctx = CallContext(caller, height)
        result, self.parameters = setter(self.parameters, ctx, self.admin, value)

        if not result.ok:
            logger.warning(f"Update of {name} by {caller} rejected: {result.error.name}")
            return result

        self.audit.record(
            ResolutionEvent(
                event_type=PARAMETER_UPDATED,
                actor=caller,
                height=height,
                payload={"parameter": name, "value": value},
            )
        )
        logger.info(f"Parameter {name} set to {value}")
        return result

    def restore(
        self,
        resolutions: Dict[int, Resolution],
        parameters: Optional[AdminParameters] = None
    ) -> None:
        """Load previously persisted records and parameters."""
        self.resolutions.update(resolutions)
        if parameters is not None:
            self.parameters = parameters
        logger.info(f"Restored {len(resolutions)} resolutions")

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def get_resolution(self, dispute_id: int) -> Optional[Resolution]:
        resolution = self.resolutions.get(dispute_id)
        return replace(resolution) if resolution is not None else None

    def get_dispute_parties(self, dispute_id: int) -> Optional[DisputeParties]:
        return self.disputes.lookup(dispute_id)

    def get_appeal_window(self) -> int:
        return self.parameters.appeal_window

    def get_max_appeals(self) -> int:
        return self.parameters.max_appeals

    def get_resolution_fee(self) -> int:
        return self.parameters.resolution_fee

    def dispute_ids(self) -> List[int]:
        return list(self.resolutions.keys())
