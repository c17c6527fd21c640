"""
Module: config.py
Description: Global configuration for the resolution engine
"""

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ResolutionConfig(BaseSettings):
    """Resolution engine configuration, overridable through .env"""

    # Administrative parameter defaults (live values are owned by the contract)
    APPEAL_WINDOW: int = 43200  # blocks after proposal
    MAX_APPEALS: int = 1
    RESOLUTION_FEE: int = 500

    # Identities
    ADMIN_IDENTITY: str = Field(default="ST1ADMIN")
    FEE_RECIPIENT: str = Field(default="ST1FEEHANDLER")

    # Persistence
    REDIS_URL: str = Field(default="redis://localhost:6379")
    REDIS_KEY_PREFIX: str = Field(default="resolution")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# Global configuration instance
config = ResolutionConfig()


# Wire error codes
ERROR_CODES: Dict[int, str] = {
    100: "NotAuthorized - caller lacks the role this operation requires",
    101: "InvalidDispute - dispute or resolution not found",
    102: "AppealExpired - appeal window has closed",
    103: "AlreadyResolved - fee already paid, fee unpaid at finalization, or resolution final",
    104: "InvalidMediator - reserved",
    105: "InvalidOutcome - outcome must be 1-256 characters",
    106: "InvalidRationale - rationale must be 1-512 characters",
    107: "AppealNotAllowed - maximum appeals reached",
    108: "FinalizationEarly - appeal window still open",
    109: "NoResolution - no resolution proposed for dispute",
}
