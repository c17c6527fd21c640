"""
Module: resolution_engine/registries.py
Description: In-memory dispute and mediator registries

Both registries are read-only from the state machine's point of view. They
are populated by whatever files disputes and vets mediators; here that is the
demo script and the test fixtures.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Set

logger = logging.getLogger("resolution.registry")


@dataclass(frozen=True)
class DisputeParties:
    """Parties and metadata registered against a dispute id."""
    landlord: str
    tenant: str
    dispute_type: str
    claim_amount: int

    def includes(self, identity: str) -> bool:
        return identity == self.landlord or identity == self.tenant

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DisputeRegistry:
    """Dispute id -> registered parties."""

    def __init__(self):
        self._disputes: Dict[int, DisputeParties] = {}

    def register(
        self,
        dispute_id: int,
        landlord: str,
        tenant: str,
        dispute_type: str,
        claim_amount: int
    ) -> DisputeParties:
        """Register (or replace) the parties for a dispute."""
        parties = DisputeParties(
            landlord=landlord,
            tenant=tenant,
            dispute_type=dispute_type,
            claim_amount=claim_amount
        )
        self._disputes[dispute_id] = parties
        logger.debug(f"Registered dispute {dispute_id}: {landlord} vs {tenant} ({dispute_type})")
        return parties

    def lookup(self, dispute_id: int) -> Optional[DisputeParties]:
        return self._disputes.get(dispute_id)

    def is_party(self, dispute_id: int, identity: str) -> bool:
        parties = self._disputes.get(dispute_id)
        return parties is not None and parties.includes(identity)

    def __contains__(self, dispute_id: int) -> bool:
        return dispute_id in self._disputes

    def __len__(self) -> int:
        return len(self._disputes)


class MediatorRegistry:
    """
    Mediator authorization.

    A mediator registered without a dispute id may mediate any dispute;
    otherwise the authorization is scoped to the listed dispute.
    """

    def __init__(self, mediators: Optional[Iterable[str]] = None):
        self._pool: Set[str] = set(mediators or ())
        self._assignments: Dict[int, Set[str]] = {}

    def register(self, identity: str, dispute_id: Optional[int] = None) -> None:
        if dispute_id is None:
            self._pool.add(identity)
        else:
            self._assignments.setdefault(dispute_id, set()).add(identity)
        logger.debug(f"Mediator {identity} registered (dispute: {'any' if dispute_id is None else dispute_id})")

    def revoke(self, identity: str, dispute_id: Optional[int] = None) -> None:
        if dispute_id is None:
            self._pool.discard(identity)
        else:
            self._assignments.get(dispute_id, set()).discard(identity)
        logger.debug(f"Mediator {identity} revoked (dispute: {'any' if dispute_id is None else dispute_id})")

    def is_authorized(self, dispute_id: int, identity: str) -> bool:
        return identity in self._pool or identity in self._assignments.get(dispute_id, ())
