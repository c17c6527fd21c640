"""
Resolution State Machine

Pure transition functions for the landlord/tenant resolution lifecycle:

    Absent -> Proposed -> FeePaid -> (Appealed)* -> Final

Each function takes the current record, the calling context (caller and
height), the live administrative parameters and the collaborators it needs,
and returns a Transition describing the new record and the fee transfer to
execute. Nothing here mutates its inputs or touches the ledger; the contract
applies transitions.

Test Command: pytest tests/test_state_machine.py -v --cov=resolution_engine/state_machine
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional, Protocol, Tuple

from resolution_engine.errors import ResolutionError, Result
from resolution_engine.registries import DisputeParties


OUTCOME_MAX_LENGTH = 256
RATIONALE_MAX_LENGTH = 512


class DisputeLookup(Protocol):
    """Read-only view of registered disputes."""

    def lookup(self, dispute_id: int) -> Optional[DisputeParties]:
        ...

    def is_party(self, dispute_id: int, identity: str) -> bool:
        ...


class MediatorCheck(Protocol):
    """Per-dispute mediator authorization."""

    def is_authorized(self, dispute_id: int, identity: str) -> bool:
        ...


@dataclass
class Resolution:
    """A mediator's proposed outcome for one dispute and its lifecycle flags."""
    mediator: str
    outcome: str
    rationale: str
    resolved_at: int
    appealed: bool = False
    appeals_count: int = 0
    final: bool = False
    fee_paid: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AdminParameters:
    """Process-wide parameters, read live by every transition."""
    appeal_window: int = 43200
    max_appeals: int = 1
    resolution_fee: int = 500

    @classmethod
    def from_config(cls, cfg) -> "AdminParameters":
        return cls(
            appeal_window=cfg.APPEAL_WINDOW,
            max_appeals=cfg.MAX_APPEALS,
            resolution_fee=cfg.RESOLUTION_FEE,
        )

    def window_end(self, resolved_at: int) -> int:
        """Last height at which an appeal is accepted, first at which finalization is."""
        return resolved_at + self.appeal_window

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CallContext:
    """Who is calling and at which ledger height."""
    caller: str
    height: int


@dataclass(frozen=True)
class FeeTransfer:
    """A value transfer that must succeed before a transition is recorded."""
    amount: int
    sender: str
    recipient: str


@dataclass(frozen=True)
class Transition:
    """Result of evaluating one operation against the current record."""
    result: Result
    resolution: Optional[Resolution] = None
    transfer: Optional[FeeTransfer] = None

    @property
    def ok(self) -> bool:
        return self.result.ok

    @classmethod
    def rejected(cls, error: ResolutionError) -> "Transition":
        return cls(result=Result.failure(error))

    @classmethod
    def accepted(
        cls,
        resolution: Resolution,
        transfer: Optional[FeeTransfer] = None
    ) -> "Transition":
        return cls(result=Result.success(), resolution=resolution, transfer=transfer)


def propose_resolution(
    current: Optional[Resolution],
    ctx: CallContext,
    disputes: DisputeLookup,
    mediators: MediatorCheck,
    dispute_id: int,
    outcome: str,
    rationale: str
) -> Transition:
    """
    Propose (or re-propose) a resolution for a dispute.

    Checks run in this order: mediator authorization, already-final record,
    outcome text, rationale text, dispute existence. Outcome and rationale
    must be ASCII. A non-final record is replaced wholesale, so flags and the
    appeal counter start over.
    """
    if not mediators.is_authorized(dispute_id, ctx.caller):
        return Transition.rejected(ResolutionError.NOT_AUTHORIZED)

    if current is not None and current.final:
        return Transition.rejected(ResolutionError.ALREADY_RESOLVED)

    if not outcome.isascii() or not 1 <= len(outcome) <= OUTCOME_MAX_LENGTH:
        return Transition.rejected(ResolutionError.INVALID_OUTCOME)

    if not rationale.isascii() or not 1 <= len(rationale) <= RATIONALE_MAX_LENGTH:
        return Transition.rejected(ResolutionError.INVALID_RATIONALE)

    if disputes.lookup(dispute_id) is None:
        return Transition.rejected(ResolutionError.INVALID_DISPUTE)

    return Transition.accepted(
        Resolution(
            mediator=ctx.caller,
            outcome=outcome,
            rationale=rationale,
            resolved_at=ctx.height,
        )
    )


def pay_resolution_fee(
    current: Optional[Resolution],
    ctx: CallContext,
    params: AdminParameters,
    mediators: MediatorCheck,
    fee_recipient: str,
    dispute_id: int
) -> Transition:
    """
    Pay the resolution fee exactly once.

    Any authorized mediator for the dispute may pay, not only the proposer.
    A repeated payment is rejected with ALREADY_RESOLVED.
    """
    if current is None:
        return Transition.rejected(ResolutionError.NO_RESOLUTION)

    if not mediators.is_authorized(dispute_id, ctx.caller):
        return Transition.rejected(ResolutionError.NOT_AUTHORIZED)

    if current.fee_paid:
        return Transition.rejected(ResolutionError.ALREADY_RESOLVED)

    return Transition.accepted(
        replace(current, fee_paid=True),
        FeeTransfer(params.resolution_fee, ctx.caller, fee_recipient),
    )


def finalize_resolution(
    current: Optional[Resolution],
    ctx: CallContext,
    params: AdminParameters
) -> Transition:
    """
    Make a resolution final once the fee is paid and the appeal window has closed.

    An unpaid fee is reported as ALREADY_RESOLVED, and so is a second
    finalization; callers rely on that exact code.
    """
    if current is None:
        return Transition.rejected(ResolutionError.INVALID_DISPUTE)

    if not current.fee_paid:
        return Transition.rejected(ResolutionError.ALREADY_RESOLVED)

    if ctx.height < params.window_end(current.resolved_at):
        return Transition.rejected(ResolutionError.FINALIZATION_EARLY)

    if current.final:
        return Transition.rejected(ResolutionError.ALREADY_RESOLVED)

    return Transition.accepted(replace(current, final=True))


def appeal_resolution(
    current: Optional[Resolution],
    ctx: CallContext,
    params: AdminParameters,
    disputes: DisputeLookup,
    fee_recipient: str,
    dispute_id: int
) -> Transition:
    """
    Lodge an appeal on behalf of the landlord or the tenant.

    The window is inclusive: an appeal at exactly ``resolved_at + appeal_window``
    is accepted. The appellant pays the resolution fee.
    """
    if current is None:
        return Transition.rejected(ResolutionError.INVALID_DISPUTE)

    if not disputes.is_party(dispute_id, ctx.caller):
        return Transition.rejected(ResolutionError.NOT_AUTHORIZED)

    if current.final:
        return Transition.rejected(ResolutionError.ALREADY_RESOLVED)

    if current.appeals_count >= params.max_appeals:
        return Transition.rejected(ResolutionError.APPEAL_NOT_ALLOWED)

    if ctx.height > params.window_end(current.resolved_at):
        return Transition.rejected(ResolutionError.APPEAL_EXPIRED)

    return Transition.accepted(
        replace(current, appealed=True, appeals_count=current.appeals_count + 1),
        FeeTransfer(params.resolution_fee, ctx.caller, fee_recipient),
    )


def _set_parameter(
    params: AdminParameters,
    ctx: CallContext,
    admin: str,
    name: str,
    value: int
) -> Tuple[Result, AdminParameters]:
    if ctx.caller != admin:
        return Result.failure(ResolutionError.NOT_AUTHORIZED), params
    return Result.success(), replace(params, **{name: value})


def set_appeal_window(
    params: AdminParameters, ctx: CallContext, admin: str, value: int
) -> Tuple[Result, AdminParameters]:
    return _set_parameter(params, ctx, admin, "appeal_window", value)


def set_max_appeals(
    params: AdminParameters, ctx: CallContext, admin: str, value: int
) -> Tuple[Result, AdminParameters]:
    return _set_parameter(params, ctx, admin, "max_appeals", value)


def set_resolution_fee(
    params: AdminParameters, ctx: CallContext, admin: str, value: int
) -> Tuple[Result, AdminParameters]:
    return _set_parameter(params, ctx, admin, "resolution_fee", value)
