"""
Module: resolution_engine/audit_anchor.py
Description: Merkle-anchored audit trail of resolution events

Features:
- One event per accepted operation (rejections leave no trace)
- Deterministic event hashing, so the root depends only on event content
- Inclusion proofs for a single event against the trail root
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger("resolution.audit")


RESOLUTION_PROPOSED = "resolution-proposed"
FEE_PAID = "fee-paid"
RESOLUTION_FINALIZED = "resolution-finalized"
RESOLUTION_APPEALED = "resolution-appealed"
PARAMETER_UPDATED = "parameter-updated"


@dataclass(frozen=True)
class ResolutionEvent:
    """Record of one accepted operation."""
    event_type: str
    actor: str
    height: int
    dispute_id: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "actor": self.actor,
            "height": self.height,
            "dispute_id": self.dispute_id,
            "payload": self.payload,
        }


class MerkleTree:
    """
    Merkle tree over a list of events.

    Odd levels duplicate their last node before pairing.
    """

    def __init__(self, events: List[Dict[str, Any]]):
        self.leaves = [self.hash_event(event) for event in events]
        self.root = self._build_root(list(self.leaves)) if self.leaves else ""

    @staticmethod
    def hash_event(event: Dict[str, Any]) -> str:
        """Hash an event deterministically."""
        event_str = json.dumps(event, sort_keys=True, default=str)
        return hashlib.sha256(event_str.encode()).hexdigest()

    @staticmethod
    def _hash_pair(left: str, right: str) -> str:
        return hashlib.sha256((left + right).encode()).hexdigest()

    def _build_root(self, level: List[str]) -> str:
        while len(level) > 1:
            if len(level) % 2 == 1:
                level.append(level[-1])
            level = [
                self._hash_pair(level[i], level[i + 1])
                for i in range(0, len(level), 2)
            ]
        return level[0]

    def get_root(self) -> str:
        return self.root

    def get_proof(self, index: int) -> List[Tuple[str, str]]:
        """
        Get the inclusion proof for the leaf at ``index``.

        Returns list of (hash, position) tuples where position is 'left' or 'right'.
        """
        if not 0 <= index < len(self.leaves):
            return []

        proof = []
        level = list(self.leaves)
        target = index

        while len(level) > 1:
            if len(level) % 2 == 1:
                level.append(level[-1])

            if target % 2 == 0:
                proof.append((level[target + 1], "right"))
            else:
                proof.append((level[target - 1], "left"))

            level = [
                self._hash_pair(level[i], level[i + 1])
                for i in range(0, len(level), 2)
            ]
            target //= 2

        return proof

    @staticmethod
    def verify_proof(leaf_hash: str, proof: List[Tuple[str, str]], root: str) -> bool:
        current = leaf_hash

        for sibling_hash, position in proof:
            if position == "left":
                current = MerkleTree._hash_pair(sibling_hash, current)
            else:
                current = MerkleTree._hash_pair(current, sibling_hash)

        return current == root


class AuditTrail:
    """Append-only event log with a Merkle root over its contents."""

    def __init__(self):
        self.events: List[ResolutionEvent] = []

    def record(self, event: ResolutionEvent) -> int:
        """Append an event and return its index."""
        self.events.append(event)
        logger.debug(f"Audit event #{len(self.events) - 1}: {event.event_type} by {event.actor}")
        return len(self.events) - 1

    def events_for(self, dispute_id: int) -> List[ResolutionEvent]:
        return [e for e in self.events if e.dispute_id == dispute_id]

    def merkle_root(self) -> str:
        return MerkleTree([e.to_dict() for e in self.events]).get_root()

    def get_proof(self, index: int) -> Optional[Dict[str, Any]]:
        """
        Get verification data for the event at ``index``.

        Returns proof data that can be checked with MerkleTree.verify_proof.
        """
        if not 0 <= index < len(self.events):
            return None

        tree = MerkleTree([e.to_dict() for e in self.events])
        return {
            "event_hash": tree.leaves[index],
            "proof": tree.get_proof(index),
            "merkle_root": tree.get_root(),
            "event_count": len(self.events),
        }

    def verify(self, index: int) -> bool:
        proof = self.get_proof(index)
        if proof is None:
            return False
        return MerkleTree.verify_proof(proof["event_hash"], proof["proof"], proof["merkle_root"])

    def __len__(self) -> int:
        return len(self.events)
