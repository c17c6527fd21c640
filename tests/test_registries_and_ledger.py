"""
Module: tests/test_registries_and_ledger.py
Description: Test dispute/mediator registries and the fee ledger
Test: pytest tests/test_registries_and_ledger.py
"""

import pytest

from resolution_engine.errors import Result, TransferError
from resolution_engine.ledger import FeeLedger, TransferRecord
from resolution_engine.registries import DisputeParties, DisputeRegistry, MediatorRegistry


class TestDisputeRegistry:
    """Test dispute registration and party lookup."""

    def test_register_and_lookup(self):
        registry = DisputeRegistry()
        parties = registry.register(1, "ST1LANDLORD", "ST1TENANT", "rent", 1000)

        assert registry.lookup(1) == parties
        assert parties == DisputeParties("ST1LANDLORD", "ST1TENANT", "rent", 1000)
        assert 1 in registry
        assert len(registry) == 1

    def test_unknown_dispute(self):
        registry = DisputeRegistry()

        assert registry.lookup(42) is None
        assert registry.is_party(42, "ST1TENANT") is False

    def test_is_party(self):
        registry = DisputeRegistry()
        registry.register(1, "ST1LANDLORD", "ST1TENANT", "deposit", 250)

        assert registry.is_party(1, "ST1LANDLORD")
        assert registry.is_party(1, "ST1TENANT")
        assert not registry.is_party(1, "ST1MEDIATOR")

    def test_parties_to_dict(self):
        parties = DisputeParties("L", "T", "repairs", 300)

        assert parties.to_dict() == {
            "landlord": "L",
            "tenant": "T",
            "dispute_type": "repairs",
            "claim_amount": 300,
        }


class TestMediatorRegistry:
    """Test global and per-dispute mediator authorization."""

    def test_pool_mediator_authorized_everywhere(self):
        registry = MediatorRegistry(["ST1MEDIATOR"])

        assert registry.is_authorized(1, "ST1MEDIATOR")
        assert registry.is_authorized(999, "ST1MEDIATOR")
        assert not registry.is_authorized(1, "ST1TENANT")

    def test_scoped_mediator(self):
        registry = MediatorRegistry()
        registry.register("ST1SCOPED", dispute_id=0)

        assert registry.is_authorized(0, "ST1SCOPED")
        assert not registry.is_authorized(1, "ST1SCOPED")

    def test_revoke(self):
        registry = MediatorRegistry(["ST1MEDIATOR"])
        registry.register("ST1SCOPED", dispute_id=3)

        registry.revoke("ST1MEDIATOR")
        registry.revoke("ST1SCOPED", dispute_id=3)
        registry.revoke("ST1UNKNOWN", dispute_id=8)

        assert not registry.is_authorized(1, "ST1MEDIATOR")
        assert not registry.is_authorized(3, "ST1SCOPED")


class TestFeeLedger:
    """Test the value-transfer primitive."""

    @pytest.fixture
    def ledger(self):
        return FeeLedger({"ST1MEDIATOR": 1000})

    def test_successful_transfer(self, ledger):
        result = ledger.transfer(500, "ST1MEDIATOR", "ST1FEEHANDLER", memo="fee")

        assert result == Result.success()
        assert ledger.balance_of("ST1MEDIATOR") == 500
        assert ledger.balance_of("ST1FEEHANDLER") == 500
        assert len(ledger.transfers) == 1

        record = ledger.transfers[0]
        assert (record.amount, record.sender, record.recipient, record.memo) == (
            500, "ST1MEDIATOR", "ST1FEEHANDLER", "fee"
        )
        assert record.transaction_hash.startswith("0x")
        assert ledger.transfers_to("ST1FEEHANDLER") == [record]

    def test_exact_balance_can_be_spent(self, ledger):
        assert ledger.transfer(1000, "ST1MEDIATOR", "ST1FEEHANDLER").ok
        assert ledger.balance_of("ST1MEDIATOR") == 0

    @pytest.mark.parametrize("amount,sender,recipient,error", [
        (1001, "ST1MEDIATOR", "ST1FEEHANDLER", TransferError.INSUFFICIENT_BALANCE),
        (10, "ST1NOBODY", "ST1FEEHANDLER", TransferError.INSUFFICIENT_BALANCE),
        (10, "ST1MEDIATOR", "ST1MEDIATOR", TransferError.SENDER_IS_RECIPIENT),
        (0, "ST1MEDIATOR", "ST1FEEHANDLER", TransferError.NON_POSITIVE_AMOUNT),
        (-5, "ST1MEDIATOR", "ST1FEEHANDLER", TransferError.NON_POSITIVE_AMOUNT),
    ])
    def test_failed_transfer_changes_nothing(self, ledger, amount, sender, recipient, error):
        result = ledger.transfer(amount, sender, recipient)

        assert result.ok is False
        assert result.value == error
        assert ledger.balance_of("ST1MEDIATOR") == 1000
        assert ledger.balance_of("ST1FEEHANDLER") == 0
        assert ledger.transfers == []
        assert ledger.metrics["transfers_rejected"] == 1

    def test_credit(self, ledger):
        assert ledger.credit("ST1TENANT", 300) == 300
        assert ledger.credit("ST1TENANT", 200) == 500

    def test_statistics(self, ledger):
        ledger.transfer(200, "ST1MEDIATOR", "ST1FEEHANDLER")
        ledger.transfer(300, "ST1MEDIATOR", "ST1FEEHANDLER")

        stats = ledger.get_statistics()

        assert stats["transfers_processed"] == 2
        assert stats["total_transferred"] == 500
        assert stats["accounts"] == 2

    def test_transfer_record_to_dict(self):
        record = TransferRecord(amount=5, sender="A", recipient="B")

        data = record.to_dict()

        assert data["amount"] == 5
        assert isinstance(data["timestamp"], str)
        assert data["transfer_id"].startswith("transfer_")


class TestResult:
    """Test result value helpers."""

    def test_success(self):
        result = Result.success()

        assert result.ok is True
        assert result.value is True
        assert result.error is None
        assert result.to_dict() == {"ok": True, "value": True}

    def test_failure(self):
        result = Result.failure(TransferError.SENDER_IS_RECIPIENT)

        assert result.error == TransferError.SENDER_IS_RECIPIENT
        assert result.to_dict() == {"ok": False, "value": 2}
