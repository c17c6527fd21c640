"""
Local Demo Runner for the Resolution Engine
Walks one landlord/tenant dispute through proposal, fee payment, appeal and finalization.
"""

import argparse
import json
import logging

from config import config
from resolution_engine import (
    DisputeRegistry,
    FeeLedger,
    MediatorRegistry,
    ResolutionContract,
)
from resolution_engine.api_models import AdminParametersView, OperationResponse, resolution_payload


# Demo Configuration
DEMO_CONFIG = {
    "dispute_id": 1,
    "landlord": "ST1LANDLORD",
    "tenant": "ST1TENANT",
    "mediator": "ST1MEDIATOR",
    "opening_balance": 10_000,
    "outcome": "70% refund",
    "rationale": "Evidence shows damage",
}


def build_contract(appeal_window: int, max_appeals: int, fee: int) -> ResolutionContract:
    """Create registries, fund the participants and configure the contract."""
    disputes = DisputeRegistry()
    disputes.register(
        DEMO_CONFIG["dispute_id"],
        DEMO_CONFIG["landlord"],
        DEMO_CONFIG["tenant"],
        "rent",
        1000
    )

    mediators = MediatorRegistry([DEMO_CONFIG["mediator"]])

    ledger = FeeLedger()
    for identity in (DEMO_CONFIG["mediator"], DEMO_CONFIG["tenant"], DEMO_CONFIG["landlord"]):
        ledger.credit(identity, DEMO_CONFIG["opening_balance"])

    contract = ResolutionContract.from_config(config, disputes, mediators, ledger)
    admin = config.ADMIN_IDENTITY
    contract.set_appeal_window(appeal_window, caller=admin)
    contract.set_max_appeals(max_appeals, caller=admin)
    contract.set_resolution_fee(fee, caller=admin)
    return contract


def run_scenario(contract: ResolutionContract) -> None:
    dispute_id = DEMO_CONFIG["dispute_id"]
    mediator = DEMO_CONFIG["mediator"]
    tenant = DEMO_CONFIG["tenant"]
    window = contract.get_appeal_window()

    steps = [
        ("propose", lambda: contract.propose_resolution(
            dispute_id, DEMO_CONFIG["outcome"], DEMO_CONFIG["rationale"], caller=mediator, height=0)),
        ("pay fee", lambda: contract.pay_resolution_fee(dispute_id, caller=mediator, height=1)),
        ("pay fee again", lambda: contract.pay_resolution_fee(dispute_id, caller=mediator, height=2)),
        ("finalize early", lambda: contract.finalize_resolution(dispute_id, caller=mediator, height=3)),
        ("tenant appeals at window end", lambda: contract.appeal_resolution(
            dispute_id, "Disagree with outcome", caller=tenant, height=window)),
        ("tenant appeals again", lambda: contract.appeal_resolution(
            dispute_id, "Still disagree", caller=tenant, height=window)),
        ("finalize", lambda: contract.finalize_resolution(dispute_id, caller=mediator, height=window + 1)),
    ]

    print("\n" + "=" * 60)
    print("RESOLUTION ENGINE - LOCAL DEMO")
    print("=" * 60)
    print(json.dumps(AdminParametersView.from_domain(contract.parameters).model_dump(by_alias=True)))

    for label, step in steps:
        response = OperationResponse.from_result(step())
        print(f"  {label:<32} -> {response.model_dump_json()}")

    print("\nFinal record:")
    print(json.dumps(resolution_payload(contract.get_resolution(dispute_id)), indent=2))
    print(f"\nFees collected by {contract.fee_recipient}: {contract.ledger.balance_of(contract.fee_recipient)}")
    print(f"Audit events: {len(contract.audit)} (root: {contract.audit.merkle_root()[:16]}...)")


def main():
    parser = argparse.ArgumentParser(description="Run the resolution engine demo")
    parser.add_argument("--appeal-window", type=int, default=config.APPEAL_WINDOW)
    parser.add_argument("--max-appeals", type=int, default=config.MAX_APPEALS)
    parser.add_argument("--fee", type=int, default=config.RESOLUTION_FEE)
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)

    contract = build_contract(args.appeal_window, args.max_appeals, args.fee)
    run_scenario(contract)


if __name__ == "__main__":
    main()
