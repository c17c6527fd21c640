"""
Module: resolution_engine/persistence.py
Description: Redis snapshot store for resolution records and parameters

Layout:
- <prefix>:resolution:<dispute_id>  hash of one Resolution
- <prefix>:resolutions              set of dispute ids with a record
- <prefix>:parameters               hash of AdminParameters
"""

import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from resolution_engine.state_machine import AdminParameters, Resolution

logger = logging.getLogger("resolution.persistence")


class ResolutionStoreError(Exception):
    """Raised when a stored record cannot be decoded."""
    pass


_BOOL_FIELDS = ("appealed", "final", "fee_paid")
_INT_FIELDS = ("resolved_at", "appeals_count")
_STR_FIELDS = ("mediator", "outcome", "rationale")


def _text(value: Any) -> str:
    return value.decode() if isinstance(value, bytes) else str(value)


def _normalize(data: Dict[Any, Any]) -> Dict[str, str]:
    return {_text(k): _text(v) for k, v in data.items()}


def encode_resolution(resolution: Resolution) -> Dict[str, str]:
    """Flatten a Resolution into a Redis hash mapping."""
    mapping = {name: getattr(resolution, name) for name in _STR_FIELDS}
    mapping.update({name: str(getattr(resolution, name)) for name in _INT_FIELDS})
    mapping.update({name: "1" if getattr(resolution, name) else "0" for name in _BOOL_FIELDS})
    return mapping


def decode_resolution(data: Dict[Any, Any]) -> Resolution:
    fields = _normalize(data)
    try:
        return Resolution(
            **{name: fields[name] for name in _STR_FIELDS},
            **{name: int(fields[name]) for name in _INT_FIELDS},
            **{name: fields[name] == "1" for name in _BOOL_FIELDS},
        )
    except (KeyError, ValueError) as e:
        raise ResolutionStoreError(f"Malformed resolution record: {e}") from e


def decode_parameters(data: Dict[Any, Any]) -> AdminParameters:
    fields = _normalize(data)
    try:
        return AdminParameters(
            appeal_window=int(fields["appeal_window"]),
            max_appeals=int(fields["max_appeals"]),
            resolution_fee=int(fields["resolution_fee"]),
        )
    except (KeyError, ValueError) as e:
        raise ResolutionStoreError(f"Malformed parameters record: {e}") from e


class RedisResolutionStore:
    """Async snapshot store backed by Redis hashes."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "resolution"):
        self.redis = redis_client
        self.key_prefix = key_prefix

    @classmethod
    def from_config(cls, cfg) -> "RedisResolutionStore":
        """Connect to REDIS_URL and use REDIS_KEY_PREFIX from the settings."""
        client = redis.from_url(cfg.REDIS_URL)
        logger.info(f"Connected resolution store to {cfg.REDIS_URL}")
        return cls(client, key_prefix=cfg.REDIS_KEY_PREFIX)

    def _resolution_key(self, dispute_id: int) -> str:
        return f"{self.key_prefix}:resolution:{dispute_id}"

    @property
    def _index_key(self) -> str:
        return f"{self.key_prefix}:resolutions"

    @property
    def _parameters_key(self) -> str:
        return f"{self.key_prefix}:parameters"

    async def save_resolution(self, dispute_id: int, resolution: Resolution) -> None:
        await self.redis.hset(
            self._resolution_key(dispute_id),
            mapping=encode_resolution(resolution)
        )
        await self.redis.sadd(self._index_key, str(dispute_id))

    async def load_resolution(self, dispute_id: int) -> Optional[Resolution]:
        data = await self.redis.hgetall(self._resolution_key(dispute_id))
        if not data:
            return None
        return decode_resolution(data)

    async def save_parameters(self, params: AdminParameters) -> None:
        await self.redis.hset(
            self._parameters_key,
            mapping={name: str(value) for name, value in params.to_dict().items()}
        )

    async def load_parameters(self) -> Optional[AdminParameters]:
        data = await self.redis.hgetall(self._parameters_key)
        if not data:
            return None
        return decode_parameters(data)

    async def save_contract(self, contract) -> int:
        """Persist every resolution record and the live parameters. Returns records saved."""
        dispute_ids = contract.dispute_ids()
        for dispute_id in dispute_ids:
            await self.save_resolution(dispute_id, contract.get_resolution(dispute_id))
        await self.save_parameters(contract.parameters)

        logger.info(f"Saved {len(dispute_ids)} resolutions to {self.key_prefix}")
        return len(dispute_ids)

    async def restore_contract(self, contract) -> int:
        """Load persisted records and parameters into a contract. Returns records loaded."""
        dispute_ids = await self.redis.smembers(self._index_key)

        resolutions: Dict[int, Resolution] = {}
        for raw_id in dispute_ids:
            try:
                dispute_id = int(_text(raw_id))
            except ValueError as e:
                raise ResolutionStoreError(f"Malformed resolution index entry: {raw_id!r}") from e
            resolution = await self.load_resolution(dispute_id)
            if resolution is None:
                logger.warning(f"Indexed dispute {dispute_id} has no stored resolution")
                continue
            resolutions[dispute_id] = resolution

        contract.restore(resolutions, await self.load_parameters())
        return len(resolutions)
