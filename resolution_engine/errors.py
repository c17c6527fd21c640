"""
Module: resolution_engine/errors.py
Description: Error codes and explicit result values for resolution operations

Every public operation returns a Result instead of raising. The numeric codes
are part of the wire format and must not be renumbered.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Union


class ResolutionError(IntEnum):
    """Failure kinds produced by the resolution state machine."""
    NOT_AUTHORIZED = 100
    INVALID_DISPUTE = 101
    APPEAL_EXPIRED = 102
    ALREADY_RESOLVED = 103
    INVALID_MEDIATOR = 104  # reserved, no transition produces it
    INVALID_OUTCOME = 105
    INVALID_RATIONALE = 106
    APPEAL_NOT_ALLOWED = 107
    FINALIZATION_EARLY = 108
    NO_RESOLUTION = 109


class TransferError(IntEnum):
    """Failure kinds produced by the value-transfer primitive."""
    INSUFFICIENT_BALANCE = 1
    SENDER_IS_RECIPIENT = 2
    NON_POSITIVE_AMOUNT = 3


@dataclass(frozen=True)
class Result:
    """Outcome of an operation: ``value`` is True on success, an error code otherwise."""
    ok: bool
    value: Union[bool, IntEnum]

    @classmethod
    def success(cls) -> "Result":
        return cls(ok=True, value=True)

    @classmethod
    def failure(cls, error: IntEnum) -> "Result":
        return cls(ok=False, value=error)

    @property
    def error(self) -> Optional[IntEnum]:
        return None if self.ok else self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "value": True if self.ok else int(self.value),
        }
