"""
Module: resolution_engine/ledger/__init__.py
Description: Fee ledger backing resolution and appeal fee transfers
"""

from .fee_ledger import FeeLedger, TransferRecord

__all__ = ["FeeLedger", "TransferRecord"]
