"""
Fee Ledger - value-transfer primitive for resolution and appeal fees
Balance Tracking · Atomic Transfers · Transfer Audit Log

Test command: pytest tests/test_registries_and_ledger.py -v --cov=resolution_engine/ledger
Metrics tracked: Transfer count, Volume transferred, Rejected transfers
"""

import hashlib
import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from resolution_engine.errors import Result, TransferError


@dataclass
class TransferRecord:
    """A completed value transfer."""
    amount: int
    sender: str
    recipient: str
    transfer_id: str = field(default_factory=lambda: f"transfer_{uuid.uuid4().hex}")
    timestamp: datetime = field(default_factory=datetime.utcnow)
    memo: Optional[str] = None
    transaction_hash: Optional[str] = None

    def __post_init__(self):
        if self.transaction_hash is None:
            hash_input = f"{self.transfer_id}{self.sender}{self.recipient}{self.amount}"
            self.transaction_hash = f"0x{hashlib.sha256(hash_input.encode()).hexdigest()}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class FeeLedger:
    """
    Minimal balance ledger.

    A transfer either moves the full amount or changes nothing. Failures are
    returned as Result values carrying a TransferError code.
    """

    def __init__(self, balances: Optional[Dict[str, int]] = None):
        self.logger = logging.getLogger("resolution.ledger")

        self.balances: Dict[str, int] = dict(balances or {})
        self.transfers: List[TransferRecord] = []

        self.metrics = {
            "transfers_processed": 0,
            "transfers_rejected": 0,
            "total_transferred": 0,
        }

    def credit(self, identity: str, amount: int) -> int:
        """Credit an identity with funds from outside the ledger."""
        self.balances[identity] = self.balances.get(identity, 0) + amount
        return self.balances[identity]

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)

    def transfer(
        self,
        amount: int,
        sender: str,
        recipient: str,
        memo: Optional[str] = None
    ) -> Result:
        """
        Move ``amount`` from sender to recipient.

        Args:
            amount: Amount to transfer, must be positive
            sender: Paying identity
            recipient: Receiving identity
            memo: Optional note stored on the transfer record

        Returns:
            Result.success() or a failure carrying a TransferError
        """
        error = self._check_transfer(amount, sender, recipient)
        if error is not None:
            self.metrics["transfers_rejected"] += 1
            self.logger.warning(
                f"Transfer of {amount} from {sender} to {recipient} rejected: {error.name}"
            )
            return Result.failure(error)

        self.balances[sender] -= amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

        record = TransferRecord(amount=amount, sender=sender, recipient=recipient, memo=memo)
        self.transfers.append(record)

        self.metrics["transfers_processed"] += 1
        self.metrics["total_transferred"] += amount

        self.logger.info(f"Transferred {amount} from {sender} to {recipient} ({record.transfer_id})")
        return Result.success()

    def _check_transfer(self, amount: int, sender: str, recipient: str) -> Optional[TransferError]:
        if amount <= 0:
            return TransferError.NON_POSITIVE_AMOUNT
        if sender == recipient:
            return TransferError.SENDER_IS_RECIPIENT
        if self.balances.get(sender, 0) < amount:
            return TransferError.INSUFFICIENT_BALANCE
        return None

    def transfers_to(self, recipient: str) -> List[TransferRecord]:
        return [t for t in self.transfers if t.recipient == recipient]

    def get_statistics(self) -> Dict[str, Any]:
        return {
            **self.metrics,
            "accounts": len(self.balances),
        }
